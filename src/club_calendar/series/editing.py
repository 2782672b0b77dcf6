"""Planning of administrative edits to appointment series.

The planners are pure: they return the records to write or delete and
leave persistence to the caller.
"""

import logging
import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Optional

import pytz

from ..expansion.indexer import build_exception_index, exception_key
from ..models.appointment import AppointmentTemplate
from ..models.exception import AppointmentException, ExceptionStatus, ModifiedData
from ..utils.date_utils import local_day, start_of_day
from ..utils.exceptions import SeriesEditError

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Termin"


def _new_id() -> str:
    return uuid.uuid4().hex


def _upsert_exception(
    existing: Iterable[AppointmentException],
    template_id: str,
    instance_day: date,
    status: ExceptionStatus,
    modified_data: Optional[ModifiedData],
    user_id: str,
    now: datetime,
    tz: pytz.BaseTzInfo,
) -> AppointmentException:
    current = build_exception_index(existing, tz).get(exception_key(template_id, instance_day))
    if current is not None:
        logger.debug(f"Updating exception {current.id} for {template_id} on {instance_day}")
        return current.model_copy(
            update={
                "status": status,
                "modified_data": modified_data,
                "user_id": user_id,
                "last_updated": now,
            }
        )

    return AppointmentException(
        id=_new_id(),
        original_appointment_id=template_id,
        original_date=start_of_day(instance_day, tz),
        status=status,
        modified_data=modified_data,
        created_at=now,
        last_updated=now,
        user_id=user_id,
    )


def plan_single_exception(
    existing: Iterable[AppointmentException],
    template_id: str,
    instance_day: date,
    changes: ModifiedData,
    user_id: str,
    now: datetime,
    tz: pytz.BaseTzInfo,
) -> AppointmentException:
    """
    Create or update the modification of one occurrence.

    Args:
        existing: Known exceptions (the one for this occurrence is reused)
        template_id: Template the occurrence belongs to
        instance_day: Original local day of the occurrence
        changes: New field values; must contain start_date
        user_id: Editing administrator
        now: Current instant, stored as metadata
        tz: Local timezone

    Returns:
        Exception record to write

    Raises:
        SeriesEditError: If changes lack a start date
    """
    if changes.start_date is None:
        raise SeriesEditError(f"Missing start date for exception of {template_id}")
    return _upsert_exception(
        existing, template_id, instance_day, ExceptionStatus.MODIFIED, changes, user_id, now, tz
    )


def plan_cancellation(
    existing: Iterable[AppointmentException],
    template_id: str,
    instance_day: date,
    user_id: str,
    now: datetime,
    tz: pytz.BaseTzInfo,
) -> AppointmentException:
    """Create or update the cancellation of one occurrence."""
    return _upsert_exception(
        existing, template_id, instance_day, ExceptionStatus.CANCELLED, None, user_id, now, tz
    )


@dataclass
class SeriesSplitPlan:
    """Records to write when an edit applies to an occurrence and all later ones."""

    new_template: AppointmentTemplate
    truncated_template: Optional[AppointmentTemplate] = None
    delete_template_id: Optional[str] = None
    obsolete_exception_ids: list[str] = field(default_factory=list)


def plan_series_split(
    template: AppointmentTemplate,
    exceptions: Iterable[AppointmentException],
    instance_day: date,
    changes: ModifiedData,
    user_id: str,
    now: datetime,
    tz: pytz.BaseTzInfo,
    type_name: Optional[str] = None,
) -> SeriesSplitPlan:
    """
    Split a series at an occurrence and apply changes to the remainder.

    The original series ends the day before ``instance_day``; if the first
    occurrence is edited it is deleted instead. A new series starting with
    the changed occurrence takes over all other settings, and exceptions of
    the original series from ``instance_day`` on become obsolete.

    Args:
        template: Series being edited
        exceptions: Known exceptions
        instance_day: Original local day of the edited occurrence
        changes: New field values; must contain start_date
        user_id: Editing administrator
        now: Current instant, stored as metadata
        tz: Local timezone
        type_name: Appointment type name, the fallback title

    Returns:
        SeriesSplitPlan describing the writes

    Raises:
        SeriesEditError: If the template has no start or changes lack a start date
    """
    if template.start_date is None:
        raise SeriesEditError(f"Appointment {template.id} has no start date")
    if changes.start_date is None:
        raise SeriesEditError(f"Missing start date for new series of {template.id}")

    day_before = instance_day - timedelta(days=1)
    if day_before >= local_day(template.start_date, tz):
        truncated = template.model_copy(
            update={"recurrence_end_date": day_before, "last_updated": now}
        )
        delete_id = None
    else:
        truncated = None
        delete_id = template.id

    title = (changes.title or "").strip() or type_name or DEFAULT_TITLE

    def _pick(name: str):
        value = getattr(changes, name)
        return value if value is not None else getattr(template, name)

    new_template = template.model_copy(
        update={
            "id": _new_id(),
            "title": title,
            "start_date": changes.start_date,
            "end_date": changes.end_date,
            "is_all_day": _pick("is_all_day"),
            "location_id": _pick("location_id"),
            "description": _pick("description"),
            "meeting_point": _pick("meeting_point"),
            "meeting_time": _pick("meeting_time"),
            "created_by": user_id,
            "created_at": now,
            "last_updated": now,
        }
    )

    obsolete = [
        e.id for e in exceptions
        if e.id is not None
        and e.original_appointment_id == template.id
        and e.original_date is not None
        and local_day(e.original_date, tz) >= instance_day
    ]

    logger.info(
        f"Split of {template.id} at {instance_day}: "
        f"{'truncate' if truncated else 'delete'} original, "
        f"{len(obsolete)} exceptions obsolete"
    )
    return SeriesSplitPlan(
        new_template=new_template,
        truncated_template=truncated,
        delete_template_id=delete_id,
        obsolete_exception_ids=obsolete,
    )
