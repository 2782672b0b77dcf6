"""Per-occurrence appointment exception data model."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import field_validator

from ..utils.date_utils import coerce_datetime
from .base import SnapshotRecord

# These cannot be cleared on an instance, so null means "keep template value"
_REQUIRED_ON_INSTANCE = frozenset({"start_date", "title", "is_all_day"})


class ExceptionStatus(str, Enum):
    """Exception status enumeration."""

    CANCELLED = "cancelled"
    MODIFIED = "modified"


class ModifiedData(SnapshotRecord):
    """
    Partial field overlay for one occurrence.

    Only fields present in the source record override the template. A field
    explicitly set to null is an override too (e.g. removing the end time),
    which is why presence is tracked through ``model_fields_set`` rather than
    by comparing values against None.
    """

    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    title: Optional[str] = None
    location_id: Optional[str] = None
    description: Optional[str] = None
    meeting_point: Optional[str] = None
    meeting_time: Optional[str] = None
    is_all_day: Optional[bool] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _parse_timestamp(cls, value: Any) -> Optional[datetime]:
        return coerce_datetime(value)

    def overrides(self) -> dict[str, Any]:
        """
        Fields explicitly carried by this overlay.

        Returns:
            Mapping of field name to override value
        """
        result = {}
        for name in self.model_fields_set:
            value = getattr(self, name)
            if value is None and name in _REQUIRED_ON_INSTANCE:
                continue
            result[name] = value
        return result


class AppointmentException(SnapshotRecord):
    """Cancellation or modification of a single occurrence of a template."""

    id: Optional[str] = None
    original_appointment_id: str
    original_date: Optional[datetime] = None
    status: ExceptionStatus
    modified_data: Optional[ModifiedData] = None

    # Metadata
    created_at: Optional[datetime] = None
    last_updated: Optional[datetime] = None
    user_id: Optional[str] = None

    @field_validator("original_date", "created_at", "last_updated", mode="before")
    @classmethod
    def _parse_timestamp(cls, value: Any) -> Optional[datetime]:
        return coerce_datetime(value)

    @property
    def is_cancellation(self) -> bool:
        return self.status == ExceptionStatus.CANCELLED

    @property
    def is_modification(self) -> bool:
        """True when the exception carries an overlay to apply."""
        return self.status == ExceptionStatus.MODIFIED and self.modified_data is not None
