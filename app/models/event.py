"""
Event model
"""

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, Float, ForeignKey

from app.core.db import Base

class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    # No ON DELETE cascade: a venue with events must not be removable
    id_event_location = Column(Integer, ForeignKey("event_locations.id"), nullable=False, index=True)
    start_date = Column(DateTime, nullable=False, index=True)
    duration_in_minutes = Column(Integer, nullable=False, default=0)
    price = Column(Float, nullable=False, default=0)
    enabled_for_enrollment = Column(Boolean, nullable=False, default=True)
    max_assistance = Column(Integer, nullable=False)
    id_creator_user = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
