"""Session state shared across flows."""

from .selection import SelectionSet
from .state import Session, SessionBus

__all__ = ["SelectionSet", "Session", "SessionBus"]
