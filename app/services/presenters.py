"""
Build nested response models from repository rows
"""

from typing import Optional

from app.schemas.event import EventResponse, ParticipantResponse
from app.schemas.event_location import EventLocationResponse
from app.schemas.geo import LocationResponse, ProvinceResponse
from app.schemas.tag import TagResponse
from app.schemas.user import UserPublic
from app.services.repositories import Repository, Row


def present_user(row: Optional[Row]) -> Optional[UserPublic]:
    if not row:
        return None
    return UserPublic(
        id=row["id"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        username=row["username"],
    )


def present_province(row: Optional[Row]) -> Optional[ProvinceResponse]:
    return ProvinceResponse(**row) if row else None


def present_location(repo: Repository, row: Optional[Row]) -> Optional[LocationResponse]:
    if not row:
        return None
    return LocationResponse(
        **row,
        province=present_province(repo.get_province(row["id_province"])),
    )


def present_event_location(
    repo: Repository,
    row: Optional[Row],
    include_creator: bool = False,
) -> Optional[EventLocationResponse]:
    if not row:
        return None
    creator = present_user(repo.get_user(row["id_creator_user"])) if include_creator else None
    return EventLocationResponse(
        **row,
        location=present_location(repo, repo.get_location(row["id_location"])),
        creator_user=creator,
    )


def present_event(repo: Repository, row: Row) -> EventResponse:
    return EventResponse(
        **row,
        event_location=present_event_location(
            repo, repo.get_event_location(row["id_event_location"]), include_creator=True
        ),
        creator_user=present_user(repo.get_user(row["id_creator_user"])),
        tags=[TagResponse(id=t["id"], name=t["name"]) for t in repo.list_event_tags(row["id"])],
    )


def present_participant(repo: Repository, enrollment: Row) -> Optional[ParticipantResponse]:
    user = present_user(repo.get_user(enrollment["id_user"]))
    if user is None:
        return None
    return ParticipantResponse(
        user=user,
        attended=bool(enrollment.get("attended")),
        rating=enrollment.get("rating"),
        description=enrollment.get("description"),
        registration_date_time=enrollment.get("registration_date_time"),
    )
