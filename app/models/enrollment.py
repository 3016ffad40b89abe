"""
EventEnrollment model
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, UniqueConstraint

from app.core.db import Base

class EventEnrollment(Base):
    __tablename__ = "event_enrollments"

    id = Column(Integer, primary_key=True, index=True)
    id_event = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    id_user = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    description = Column(String(255), nullable=True)
    registration_date_time = Column(DateTime, default=datetime.utcnow, nullable=False)
    attended = Column(Boolean, default=False, nullable=False)
    observations = Column(String(255), nullable=True)
    rating = Column(Integer, nullable=True)

    __table_args__ = (UniqueConstraint("id_event", "id_user", name="uq_enrollment_event_user"),)
