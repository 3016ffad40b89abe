"""
SQLAlchemy implementation of the repository contract (SQLite and PostgreSQL).
"""

from __future__ import annotations

import logging
from datetime import datetime, time, timedelta
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError
from app.models import (
    Event,
    EventEnrollment,
    EventLocation,
    EventTag,
    Location,
    Province,
    Tag,
    User,
)
from app.services.repositories import EventFilters, Repository, Row, to_naive_utc

logger = logging.getLogger(__name__)


def _to_dict(obj) -> Optional[Row]:
    if obj is None:
        return None
    return {column.name: getattr(obj, column.name) for column in obj.__table__.columns}


def _naive(data: Row) -> Row:
    return {k: to_naive_utc(v) if isinstance(v, datetime) else v for k, v in data.items()}


class SqlRepository(Repository):
    backend_name = "sql"

    def __init__(self, db: Session):
        self.db = db

    def _add(self, obj, conflict_message: str = "Duplicate record"):
        self.db.add(obj)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            logger.warning(f"Integrity error on {obj.__tablename__}: {exc.orig}")
            raise ConflictError(conflict_message)
        self.db.refresh(obj)
        return _to_dict(obj)

    # -------- Users --------

    def create_user(self, data: Row) -> Row:
        return self._add(User(**data), "The username is already registered.")

    def get_user(self, user_id: int) -> Optional[Row]:
        return _to_dict(self.db.query(User).filter(User.id == user_id).first())

    def get_user_by_username(self, username: str) -> Optional[Row]:
        return _to_dict(self.db.query(User).filter(User.username == username).first())

    # -------- Provinces / locations --------

    def create_province(self, data: Row) -> Row:
        return self._add(Province(**data))

    def list_provinces(self) -> List[Row]:
        provinces = self.db.query(Province).order_by(
            Province.display_order.is_(None), Province.display_order, Province.name
        ).all()
        return [_to_dict(p) for p in provinces]

    def get_province(self, province_id: int) -> Optional[Row]:
        return _to_dict(self.db.query(Province).filter(Province.id == province_id).first())

    def create_location(self, data: Row) -> Row:
        return self._add(Location(**data))

    def list_locations(self, province_id: Optional[int] = None) -> List[Row]:
        query = self.db.query(Location)
        if province_id is not None:
            query = query.filter(Location.id_province == province_id)
        return [_to_dict(loc) for loc in query.order_by(Location.name).all()]

    def get_location(self, location_id: int) -> Optional[Row]:
        return _to_dict(self.db.query(Location).filter(Location.id == location_id).first())

    # -------- Tags --------

    def create_tag(self, name: str) -> Row:
        return self._add(Tag(name=name), f"Tag '{name}' already exists.")

    def list_tags(self) -> List[Row]:
        return [_to_dict(t) for t in self.db.query(Tag).order_by(Tag.name).all()]

    def list_event_tags(self, event_id: int) -> List[Row]:
        tags = (
            self.db.query(Tag)
            .join(EventTag, EventTag.id_tag == Tag.id)
            .filter(EventTag.id_event == event_id)
            .order_by(Tag.name)
            .all()
        )
        return [_to_dict(t) for t in tags]

    def _set_event_tags(self, event_id: int, tag_ids: List[int]) -> None:
        self.db.query(EventTag).filter(EventTag.id_event == event_id).delete(synchronize_session=False)
        for tag_id in dict.fromkeys(tag_ids):
            self.db.add(EventTag(id_event=event_id, id_tag=tag_id))

    # -------- Event locations --------

    def create_event_location(self, data: Row) -> Row:
        return self._add(EventLocation(**data))

    def get_event_location(self, event_location_id: int) -> Optional[Row]:
        return _to_dict(
            self.db.query(EventLocation).filter(EventLocation.id == event_location_id).first()
        )

    def list_event_locations(self, creator_user_id: int, limit: int, offset: int) -> Tuple[List[Row], int]:
        query = self.db.query(EventLocation).filter(EventLocation.id_creator_user == creator_user_id)
        total = query.count()
        rows = query.order_by(EventLocation.id).offset(offset).limit(limit).all()
        return [_to_dict(r) for r in rows], total

    def update_event_location(self, event_location_id: int, data: Row) -> Optional[Row]:
        venue = self.db.query(EventLocation).filter(EventLocation.id == event_location_id).first()
        if not venue:
            return None
        for key, value in data.items():
            setattr(venue, key, value)
        self.db.commit()
        self.db.refresh(venue)
        return _to_dict(venue)

    def delete_event_location(self, event_location_id: int) -> bool:
        deleted = self.db.query(EventLocation).filter(EventLocation.id == event_location_id).delete()
        self.db.commit()
        return deleted > 0

    def count_events_at_location(self, event_location_id: int) -> int:
        return self.db.query(Event).filter(Event.id_event_location == event_location_id).count()

    def max_assistance_at_location(self, event_location_id: int) -> int:
        largest = self.db.query(func.max(Event.max_assistance)).filter(
            Event.id_event_location == event_location_id
        ).scalar()
        return largest or 0

    # -------- Events --------

    def create_event(self, data: Row, tag_ids: List[int]) -> Row:
        event = Event(**_naive(data))
        self.db.add(event)
        self.db.flush()
        self._set_event_tags(event.id, tag_ids)
        self.db.commit()
        self.db.refresh(event)
        return _to_dict(event)

    def get_event(self, event_id: int) -> Optional[Row]:
        return _to_dict(self.db.query(Event).filter(Event.id == event_id).first())

    def list_events(self, filters: EventFilters, limit: int, offset: int) -> Tuple[List[Row], int]:
        query = self.db.query(Event)
        if filters.name:
            query = query.filter(func.lower(Event.name).contains(filters.name.lower(), autoescape=True))
        if filters.start_date:
            day_start = datetime.combine(filters.start_date, time.min)
            query = query.filter(
                Event.start_date >= day_start,
                Event.start_date < day_start + timedelta(days=1),
            )
        if filters.tag:
            tagged = (
                select(EventTag.id_event)
                .join(Tag, Tag.id == EventTag.id_tag)
                .where(func.lower(Tag.name) == filters.tag.lower())
            )
            query = query.filter(Event.id.in_(tagged))
        total = query.count()
        rows = query.order_by(Event.start_date.asc(), Event.id).offset(offset).limit(limit).all()
        return [_to_dict(r) for r in rows], total

    def update_event(self, event_id: int, data: Row, tag_ids: Optional[List[int]] = None) -> Optional[Row]:
        event = self.db.query(Event).filter(Event.id == event_id).first()
        if not event:
            return None
        for key, value in _naive(data).items():
            setattr(event, key, value)
        if tag_ids is not None:
            self._set_event_tags(event_id, tag_ids)
        self.db.commit()
        self.db.refresh(event)
        return _to_dict(event)

    def delete_event(self, event_id: int) -> bool:
        self.db.query(EventTag).filter(EventTag.id_event == event_id).delete(synchronize_session=False)
        deleted = self.db.query(Event).filter(Event.id == event_id).delete(synchronize_session=False)
        self.db.commit()
        return deleted > 0

    # -------- Enrollments --------

    def create_enrollment(self, event_id: int, user_id: int) -> Row:
        enrollment = EventEnrollment(
            id_event=event_id,
            id_user=user_id,
            registration_date_time=datetime.utcnow(),
            attended=False,
        )
        return self._add(enrollment, "The user is already enrolled in the event.")

    def get_enrollment(self, event_id: int, user_id: int) -> Optional[Row]:
        return _to_dict(
            self.db.query(EventEnrollment)
            .filter(EventEnrollment.id_event == event_id, EventEnrollment.id_user == user_id)
            .first()
        )

    def delete_enrollment(self, event_id: int, user_id: int) -> bool:
        deleted = self.db.query(EventEnrollment).filter(
            EventEnrollment.id_event == event_id,
            EventEnrollment.id_user == user_id,
        ).delete()
        self.db.commit()
        return deleted > 0

    def count_enrollments(self, event_id: int) -> int:
        return self.db.query(EventEnrollment).filter(EventEnrollment.id_event == event_id).count()

    def list_enrollments(self, event_id: int, limit: int, offset: int) -> Tuple[List[Row], int]:
        query = self.db.query(EventEnrollment).filter(EventEnrollment.id_event == event_id)
        total = query.count()
        rows = query.order_by(
            EventEnrollment.registration_date_time, EventEnrollment.id
        ).offset(offset).limit(limit).all()
        return [_to_dict(r) for r in rows], total
