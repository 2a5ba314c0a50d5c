"""Event model definition."""

import uuid
from typing import Any, Dict

from sqlalchemy import Column, DateTime, Index, String, Text, Uuid

from .base import Base
from ..utils.timestamps import ensure_utc, format_rfc3339

class Event(Base):
    """
    A titled time interval with an optional description.

    Fields:
        id: Unique identifier, generated by the service
        title: Event title (non-empty)
        description: Event description (None when absent, distinct from "")
        start_time: When the event starts
        end_time: When the event ends, always after start_time
        created_at: When the service stored the event
    """
    __tablename__ = 'events'
    __table_args__ = (
        Index('ix_events_start_time', 'start_time', 'created_at', 'id'),
    )

    id = Column(Uuid, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)

    def __init__(self, **kwargs):
        """Initialize Event, normalizing timestamps to UTC."""
        for key in ('start_time', 'end_time', 'created_at'):
            if kwargs.get(key) is not None:
                kwargs[key] = ensure_utc(kwargs[key])
        super().__init__(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire projection."""
        return {
            'id': str(self.id),
            'title': self.title,
            'description': self.description,
            'start_time': format_rfc3339(self.start_time),
            'end_time': format_rfc3339(self.end_time),
            'created_at': format_rfc3339(self.created_at),
        }

    def __str__(self) -> str:
        """String representation."""
        return f"Event(id={self.id}, title={self.title}, start_time={self.start_time})"

    @staticmethod
    def new_id() -> uuid.UUID:
        """Generate a fresh event identifier."""
        return uuid.uuid4()
