"""Lookup of appointment exceptions by template and calendar day."""

import logging
from collections.abc import Iterable
from datetime import date, datetime
from typing import Optional

import pytz

from ..models.exception import AppointmentException
from ..utils.date_utils import local_day, localize

logger = logging.getLogger(__name__)

ExceptionKey = tuple[str, date]
ExceptionIndex = dict[ExceptionKey, AppointmentException]


def exception_key(template_id: str, day: date) -> ExceptionKey:
    """Composite key of one occurrence: template id plus local calendar day."""
    return template_id, day


def _recency(exception: AppointmentException, tz: pytz.BaseTzInfo) -> Optional[datetime]:
    stamp = exception.last_updated or exception.created_at
    return localize(stamp, tz) if stamp is not None else None


def _supersedes(
    current: AppointmentException,
    candidate: AppointmentException,
    tz: pytz.BaseTzInfo,
) -> bool:
    """True when the already indexed exception is strictly more recent."""
    current_stamp = _recency(current, tz)
    candidate_stamp = _recency(candidate, tz)
    if current_stamp is None or candidate_stamp is None:
        return False
    return current_stamp > candidate_stamp


def build_exception_index(
    exceptions: Iterable[AppointmentException],
    tz: pytz.BaseTzInfo,
) -> ExceptionIndex:
    """
    Index exceptions by (template id, local day of the original date).

    If several exceptions target the same occurrence, the most recently
    updated one wins; without usable timestamps the later one in input
    order wins.

    Args:
        exceptions: Exception records
        tz: Timezone defining the local civil day

    Returns:
        Mapping from exception key to exception
    """
    index: ExceptionIndex = {}

    for exception in exceptions:
        if exception.original_date is None:
            logger.debug(
                f"Skipping exception {exception.id} for {exception.original_appointment_id}: "
                "no original date"
            )
            continue

        key = exception_key(
            exception.original_appointment_id, local_day(exception.original_date, tz)
        )
        current = index.get(key)
        if current is not None:
            if _supersedes(current, exception, tz):
                logger.debug(f"Duplicate exception {exception.id} for {key} ignored")
                continue
            logger.debug(f"Duplicate exception {current.id} for {key} replaced")
        index[key] = exception

    return index
