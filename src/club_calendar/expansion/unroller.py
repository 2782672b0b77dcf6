"""Recurrence unrolling of appointment templates."""

import logging
from collections.abc import Iterator
from datetime import date, datetime, timedelta
from typing import Optional

from ..models.appointment import AppointmentTemplate, Recurrence
from ..models.instance import UnrolledInstance
from ..utils.date_utils import (
    add_days,
    add_months,
    get_horizon_end,
    get_timezone,
    local_day,
    localize,
    months_between,
)
from .indexer import ExceptionIndex, exception_key
from .settings import ExpansionSettings, ExpansionWindow

logger = logging.getLogger(__name__)

_STEP_DAYS = {
    Recurrence.DAILY: 1,
    Recurrence.WEEKLY: 7,
    Recurrence.BI_WEEKLY: 14,
}


class RecurrenceUnroller:
    """Generate the concrete occurrences of one template."""

    def __init__(self, settings: Optional[ExpansionSettings] = None):
        """
        Initialize unroller.

        Args:
            settings: Expansion settings (defaults to ExpansionSettings())
        """
        self.settings = settings or ExpansionSettings()
        self.tz = get_timezone(self.settings.timezone)

    def unroll(
        self,
        template: AppointmentTemplate,
        index: ExceptionIndex,
        window: ExpansionWindow,
    ) -> Iterator[UnrolledInstance]:
        """
        Yield the occurrences of a template inside the window.

        Occurrences are computed on local wall-clock time from the template
        start, so a 18:00 training stays at 18:00 across DST changes.
        Cancelled occurrences are yielded with ``is_cancelled=True``.

        Args:
            template: Appointment template
            index: Exception index from build_exception_index
            window: Expansion window

        Yields:
            UnrolledInstance objects in chronological order of their original day
        """
        if template.start_date is None:
            logger.debug(f"Skipping appointment {template.id}: no start date")
            return

        anchor = localize(template.start_date, self.tz)
        duration = None
        if template.end_date is not None:
            duration = localize(template.end_date, self.tz) - anchor

        rule = template.recurrence_rule
        if rule == Recurrence.NONE:
            if window.contains(anchor.date()):
                yield self._build(template, anchor, duration, template.id, index)
            return

        if rule is None:
            logger.debug(
                f"Unknown recurrence '{template.recurrence}' on {template.id}, "
                "using first occurrence only"
            )

        last_day = self._last_day(template, window)
        first_day = self._first_day(template, window)
        wall_clock = anchor.replace(tzinfo=None)
        step = self._first_step(rule, anchor.date(), first_day)
        generated = 0

        while generated < self.settings.max_iterations:
            occurrence = self._occurrence(wall_clock, rule, step)
            day = occurrence.date()
            if day > last_day:
                break

            if first_day is None or day >= first_day:
                generated += 1
                start = self.tz.normalize(self.tz.localize(occurrence))
                yield self._build(
                    template, start, duration, f"{template.id}-{day.isoformat()}", index
                )

            if rule is None:
                break
            step += 1
        else:
            logger.debug(
                f"Appointment {template.id} truncated after {generated} occurrences"
            )

    def _end_day(self, template: AppointmentTemplate) -> Optional[date]:
        """Local calendar day of the recurrence end, inclusive."""
        end = template.recurrence_end_date
        if isinstance(end, datetime):
            return local_day(end, self.tz)
        return end

    def _first_day(self, template: AppointmentTemplate, window: ExpansionWindow) -> Optional[date]:
        """
        First day an occurrence of a recurring template may fall on.

        A series without recurrence end and without caller window covers
        the horizon only, starting today.
        """
        if window.start is not None:
            return window.start
        if (
            template.recurrence_rule is not None
            and template.recurrence_end_date is None
            and window.end is None
        ):
            return local_day(window.now, self.tz)
        return None

    def _last_day(self, template: AppointmentTemplate, window: ExpansionWindow) -> date:
        """Last day an occurrence of a recurring template may fall on."""
        end_day = self._end_day(template)
        if end_day is not None:
            if window.end is not None:
                return min(end_day, window.end)
            return end_day
        if window.end is not None:
            return window.end
        return get_horizon_end(window.now, self.tz, self.settings.horizon_days)

    @staticmethod
    def _first_step(
        rule: Optional[Recurrence],
        anchor_day: date,
        window_start: Optional[date],
    ) -> int:
        """Index of the first occurrence that can fall inside the window."""
        if window_start is None or window_start <= anchor_day:
            return 0
        if rule in _STEP_DAYS:
            days = (window_start - anchor_day).days
            return -(-days // _STEP_DAYS[rule])
        if rule == Recurrence.MONTHLY:
            # One month early; clamping may put that occurrence inside the window
            return max(0, months_between(anchor_day, window_start) - 1)
        return 0

    @staticmethod
    def _occurrence(wall_clock: datetime, rule: Optional[Recurrence], step: int) -> datetime:
        """
        Local wall-clock time of the n-th occurrence.

        Always derived from the anchor, never from the previous occurrence,
        so monthly series anchored on the 31st return to the 31st after a
        clamped February.
        """
        if rule in _STEP_DAYS:
            return add_days(wall_clock, step * _STEP_DAYS[rule])
        if rule == Recurrence.MONTHLY:
            return add_months(wall_clock, step)
        return wall_clock

    def _build(
        self,
        template: AppointmentTemplate,
        start: datetime,
        duration: Optional[timedelta],
        virtual_id: str,
        index: ExceptionIndex,
    ) -> UnrolledInstance:
        """Create one occurrence and apply its exception, if any."""
        day = start.date()
        exception = index.get(exception_key(template.id, day))

        fields = {
            "title": template.title,
            "description": template.description,
            "appointment_type_id": template.appointment_type_id,
            "location_id": template.location_id,
            "meeting_point": template.meeting_point,
            "meeting_time": template.meeting_time,
            "is_all_day": template.is_all_day,
        }
        end = start + duration if duration is not None else None
        is_exception = False

        if exception is not None and exception.is_modification:
            overrides = exception.modified_data.overrides()
            if "start_date" in overrides:
                start = localize(overrides.pop("start_date"), self.tz)
                end = start + duration if duration is not None else None
            if "end_date" in overrides:
                new_end = overrides.pop("end_date")
                end = localize(new_end, self.tz) if new_end is not None else None
            fields.update(overrides)
            is_exception = True

        return UnrolledInstance(
            virtual_id=virtual_id,
            original_id=template.id,
            original_day=day,
            exception_id=exception.id if exception is not None else None,
            start=start,
            end=end,
            visibility=template.visibility,
            recurrence=template.recurrence,
            rsvp_deadline=template.rsvp_deadline,
            is_exception=is_exception,
            is_cancelled=exception is not None and exception.is_cancellation,
            **fields,
        )
