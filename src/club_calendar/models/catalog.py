"""Catalog records consumed alongside appointments."""

import datetime as dt
from enum import Enum
from typing import Any, Optional

from pydantic import Field, field_validator

from .base import SnapshotRecord


class AppointmentType(SnapshotRecord):
    """Appointment type (training, match day, event, ...)."""

    id: str
    name: str

    model_config = {"frozen": True}


class Location(SnapshotRecord):
    """Venue an appointment takes place at."""

    id: str
    name: str
    address: Optional[str] = None


class Group(SnapshotRecord):
    """Club group; only groups of type "team" carry appointments."""

    id: str
    name: str
    type: str = "team"
    parent_id: Optional[str] = None


class MemberProfile(SnapshotRecord):
    """Club member with team memberships."""

    user_id: str
    first_name: str = ""
    last_name: str = ""
    teams: list[str] = Field(default_factory=list)


class ResponseStatus(str, Enum):
    """RSVP answer to one occurrence."""

    ACCEPTED = "zugesagt"
    DECLINED = "abgesagt"
    UNSURE = "unsicher"


class AppointmentResponse(SnapshotRecord):
    """A member's RSVP for one occurrence, keyed by template id and ISO day."""

    user_id: str
    appointment_id: str
    date: str
    status: ResponseStatus
    reason: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def _iso_day(cls, value: Any) -> Any:
        if isinstance(value, dt.datetime):
            return value.date().isoformat()
        if isinstance(value, dt.date):
            return value.isoformat()
        return value
