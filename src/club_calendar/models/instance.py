"""Concrete appointment occurrence produced by expansion."""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from .appointment import Visibility


class OccurrenceState(str, Enum):
    """Display state of a single occurrence."""

    SCHEDULED = "scheduled"
    MODIFIED = "modified"
    CANCELLED = "cancelled"


class UnrolledInstance(BaseModel):
    """One occurrence of a template, with any exception already applied."""

    # Identifiers
    virtual_id: str
    original_id: str
    original_day: date
    exception_id: Optional[str] = None

    # Basic properties
    title: str
    description: Optional[str] = None
    appointment_type_id: Optional[str] = None
    location_id: Optional[str] = None
    meeting_point: Optional[str] = None
    meeting_time: Optional[str] = None
    visibility: Visibility

    # Time properties
    start: datetime
    end: Optional[datetime] = None
    is_all_day: bool = False

    # Series information
    recurrence: Optional[str] = None
    rsvp_deadline: Optional[datetime] = None

    # Overlay flags
    is_exception: bool = False
    is_cancelled: bool = False

    model_config = {"frozen": True}

    @property
    def original_day_iso(self) -> str:
        return self.original_day.isoformat()

    @property
    def state(self) -> OccurrenceState:
        if self.is_cancelled:
            return OccurrenceState.CANCELLED
        if self.is_exception:
            return OccurrenceState.MODIFIED
        return OccurrenceState.SCHEDULED

    def response_key(self, user_id: str) -> tuple[str, str, str]:
        """Key joining this occurrence with a member's RSVP response."""
        return user_id, self.original_id, self.original_day_iso
