"""Models package initialization."""

from .base import Base
from .event import Event

__all__ = ['Base', 'Event']
