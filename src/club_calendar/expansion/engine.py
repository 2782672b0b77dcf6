"""Appointment expansion engine."""

import logging
from collections.abc import Iterable
from datetime import date, datetime
from typing import Optional, Union

from ..models.appointment import AppointmentTemplate
from ..models.exception import AppointmentException
from ..models.instance import UnrolledInstance
from ..sources.base import ExceptionSource, TemplateSource
from ..utils.date_utils import get_timezone, local_day
from .filters import (
    CancellationMode,
    DashboardSlots,
    apply_filters,
    build_filters,
    sort_instances,
    split_headline,
    upcoming,
)
from .indexer import build_exception_index
from .settings import ExpansionSettings, ExpansionWindow
from .unroller import RecurrenceUnroller

logger = logging.getLogger(__name__)

DayLike = Union[date, datetime, None]


def unroll_appointments(
    templates: Iterable[AppointmentTemplate],
    exceptions: Iterable[AppointmentException],
    now: datetime,
    window_start: DayLike = None,
    window_end: DayLike = None,
    settings: Optional[ExpansionSettings] = None,
) -> list[UnrolledInstance]:
    """
    Unroll templates into occurrences with exceptions applied.

    Cancelled occurrences are included and flagged. A template whose data
    breaks unrolling is skipped as a whole.

    Args:
        templates: Appointment templates
        exceptions: Appointment exceptions
        now: Current instant, bounds series without an end date
        window_start: First local day of interest (inclusive)
        window_end: Last local day of interest (inclusive)
        settings: Expansion settings

    Returns:
        All occurrences sorted by start
    """
    settings = settings or ExpansionSettings()
    tz = get_timezone(settings.timezone)
    unroller = RecurrenceUnroller(settings)
    index = build_exception_index(exceptions, tz)
    window = ExpansionWindow(
        now=now,
        start=_to_day(window_start, tz),
        end=_to_day(window_end, tz),
    )

    result: list[UnrolledInstance] = []
    skipped = 0
    for template in templates:
        try:
            instances = list(unroller.unroll(template, index, window))
        except (ArithmeticError, TypeError, ValueError) as e:
            skipped += 1
            logger.warning(f"Skipping appointment {template.id}: {e}")
            continue
        result.extend(instances)

    logger.debug(
        f"Unrolled {len(result)} occurrences from {len(index)} exceptions"
        + (f", {skipped} appointments skipped" if skipped else "")
    )
    return sort_instances(result)


def _to_day(value: DayLike, tz) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return local_day(value, tz)
    return value


class AppointmentExpander:
    """Expand appointment templates for calendar, dashboard and absence views."""

    def __init__(
        self,
        template_source: TemplateSource,
        exception_source: ExceptionSource,
        settings: Optional[ExpansionSettings] = None,
    ):
        """
        Initialize expander.

        Args:
            template_source: Provider of appointment templates
            exception_source: Provider of appointment exceptions
            settings: Expansion settings (defaults to ExpansionSettings())
        """
        self.template_source = template_source
        self.exception_source = exception_source
        self.settings = settings or ExpansionSettings()
        self.tz = get_timezone(self.settings.timezone)

    def unroll(
        self,
        now: datetime,
        window_start: DayLike = None,
        window_end: DayLike = None,
    ) -> list[UnrolledInstance]:
        """
        Unroll all templates without display filtering.

        Raises:
            SourceReadError: If a source cannot be read
        """
        templates = self.template_source.read_templates()
        exceptions = self.exception_source.read_exceptions()
        logger.info(f"Expanding {len(templates)} appointments, {len(exceptions)} exceptions")
        return unroll_appointments(
            templates,
            exceptions,
            now,
            window_start=window_start,
            window_end=window_end,
            settings=self.settings,
        )

    def expand(
        self,
        now: datetime,
        viewer_team_ids: Optional[Iterable[str]] = None,
        window_start: DayLike = None,
        window_end: DayLike = None,
        cancellation: CancellationMode = CancellationMode.HIDE,
        type_ids: Optional[Iterable[str]] = None,
        team_ids: Optional[Iterable[str]] = None,
    ) -> list[UnrolledInstance]:
        """
        Expand appointments visible to a viewer.

        Args:
            now: Current instant
            viewer_team_ids: Viewer's teams (None skips the visibility check)
            window_start: First local day of interest (inclusive)
            window_end: Last local day of interest (inclusive)
            cancellation: HIDE for display, ONLY for absence review
            type_ids: Selected appointment types (None keeps all)
            team_ids: Selected teams (None keeps all)

        Returns:
            Filtered instances sorted by start

        Raises:
            SourceReadError: If a source cannot be read
        """
        instances = self.unroll(now, window_start=window_start, window_end=window_end)
        filters = build_filters(
            viewer_team_ids=viewer_team_ids,
            cancellation=cancellation,
            type_ids=type_ids,
            team_ids=team_ids,
        )
        result = apply_filters(instances, filters)
        logger.info(f"{len(result)} of {len(instances)} occurrences shown")
        return result

    def dashboard(
        self,
        now: datetime,
        viewer_team_ids: Iterable[str],
        headline_type_ids: set[str],
        headline_limit: int = 1,
        other_limit: int = 5,
    ) -> DashboardSlots:
        """
        Next appointments for the dashboard, headline type first.

        Args:
            now: Current instant
            viewer_team_ids: Viewer's teams
            headline_type_ids: Ids of the headline appointment type (e.g. match day)
            headline_limit: Size of the headline slot
            other_limit: Size of the regular list

        Returns:
            DashboardSlots with both partitions
        """
        instances = self.expand(now, viewer_team_ids=viewer_team_ids, window_start=now)
        return split_headline(
            upcoming(instances, now, self.tz),
            headline_type_ids,
            headline_limit=headline_limit,
            other_limit=other_limit,
        )
