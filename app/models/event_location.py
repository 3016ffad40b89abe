"""
EventLocation model - a bookable venue owned by the user who created it
"""

from sqlalchemy import Column, Integer, String, ForeignKey

from app.core.db import Base

class EventLocation(Base):
    __tablename__ = "event_locations"

    id = Column(Integer, primary_key=True, index=True)
    id_location = Column(Integer, ForeignKey("locations.id"), nullable=False)
    name = Column(String(255), nullable=False)
    full_address = Column(String(255), nullable=False)
    max_capacity = Column(Integer, nullable=False)
    latitude = Column(String(50), nullable=True)
    longitude = Column(String(50), nullable=True)
    id_creator_user = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
