"""
Tag and EventTag (many-to-many junction) models
"""

from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint

from app.core.db import Base

class Tag(Base):
    __tablename__ = "tags"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)


class EventTag(Base):
    __tablename__ = "event_tags"

    id = Column(Integer, primary_key=True, index=True)
    id_event = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    id_tag = Column(Integer, ForeignKey("tags.id"), nullable=False)

    __table_args__ = (UniqueConstraint("id_event", "id_tag", name="uq_event_tag"),)
