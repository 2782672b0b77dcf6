"""Appointment template data model."""

from datetime import date, datetime
from enum import Enum
from typing import Any, Optional, Union

from pydantic import Field, field_validator

from ..utils.date_utils import coerce_datetime, coerce_end_day
from .base import SnapshotRecord


class Recurrence(str, Enum):
    """Recurrence rule enumeration."""

    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    BI_WEEKLY = "bi-weekly"
    MONTHLY = "monthly"


class VisibilityType(str, Enum):
    """Who can see an appointment."""

    ALL = "all"
    SPECIFIC_TEAMS = "specificTeams"


class Visibility(SnapshotRecord):
    """Appointment visibility."""

    type: VisibilityType = VisibilityType.ALL
    team_ids: list[str] = Field(default_factory=list)

    def is_visible_to(self, team_ids: set[str]) -> bool:
        """Check whether any of the given teams may see the appointment."""
        if self.type == VisibilityType.ALL:
            return True
        return any(team_id in team_ids for team_id in self.team_ids)


class AppointmentTemplate(SnapshotRecord):
    """Authored single or recurring appointment."""

    # Identifiers
    id: str
    title: str

    # Time properties
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_all_day: bool = False

    # Recurrence (raw value; unknown rules are tolerated)
    recurrence: Optional[str] = Recurrence.NONE.value
    recurrence_end_date: Optional[Union[datetime, date]] = None

    # Classification
    appointment_type_id: Optional[str] = None
    location_id: Optional[str] = None
    description: Optional[str] = None
    meeting_point: Optional[str] = None
    meeting_time: Optional[str] = None
    visibility: Visibility = Field(default_factory=Visibility)
    rsvp_deadline: Optional[datetime] = None

    # Metadata
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    last_updated: Optional[datetime] = None

    @field_validator(
        "start_date", "end_date", "rsvp_deadline", "created_at", "last_updated",
        mode="before",
    )
    @classmethod
    def _parse_timestamp(cls, value: Any) -> Optional[datetime]:
        return coerce_datetime(value)

    @field_validator("recurrence_end_date", mode="before")
    @classmethod
    def _parse_end_day(cls, value: Any) -> Optional[Union[datetime, date]]:
        return coerce_end_day(value)

    @field_validator("visibility", mode="before")
    @classmethod
    def _default_visibility(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def recurrence_rule(self) -> Optional[Recurrence]:
        """Parsed recurrence rule, or None if the stored value is not recognized."""
        if not self.recurrence:
            return Recurrence.NONE
        try:
            return Recurrence(self.recurrence)
        except ValueError:
            return None

    @property
    def is_recurring(self) -> bool:
        return self.recurrence_rule != Recurrence.NONE

