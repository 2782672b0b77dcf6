"""iCalendar export of unrolled instances."""

import logging
from collections.abc import Iterable
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

import pytz
from icalendar import Calendar, Event

from ..models.appointment import VisibilityType
from ..models.instance import UnrolledInstance
from ..utils.exceptions import ExportError
from .base import InstanceWriter

logger = logging.getLogger(__name__)

PRODUCT_ID = "-//club-calendar//Vereinskalender//DE"


class IcsWriter(InstanceWriter):
    """Write instances as an iCalendar (.ics) document."""

    def __init__(
        self,
        now: datetime,
        calendar_name: str = "Vereinskalender",
        location_names: Optional[dict[str, str]] = None,
        team_names: Optional[dict[str, str]] = None,
        headline_type_ids: Optional[set[str]] = None,
    ):
        """
        Initialize ICS writer.

        Args:
            now: Timestamp written as DTSTAMP
            calendar_name: Calendar display name
            location_names: Location id to name
            team_names: Team id to name, used for headline titles
            headline_type_ids: Appointment types whose titles name their teams
        """
        self.now = now
        self.calendar_name = calendar_name
        self.location_names = location_names or {}
        self.team_names = team_names or {}
        self.headline_type_ids = headline_type_ids or set()

    def display_title(self, instance: UnrolledInstance) -> str:
        """Title with team names appended for team-specific headline events."""
        if (
            instance.appointment_type_id in self.headline_type_ids
            and instance.visibility.type == VisibilityType.SPECIFIC_TEAMS
        ):
            names = [
                self.team_names[team_id]
                for team_id in instance.visibility.team_ids
                if team_id in self.team_names
            ]
            if names:
                return f"{instance.title} ({', '.join(names)})"
        return instance.title

    def _event(self, instance: UnrolledInstance) -> Event:
        event = Event()
        event.add("uid", f"{instance.virtual_id}@club-calendar")
        event.add("dtstamp", self.now.astimezone(pytz.utc))
        event.add("summary", self.display_title(instance))

        if instance.is_all_day:
            last = (instance.end or instance.start).date()
            event.add("dtstart", instance.start.date())
            event.add("dtend", max(last, instance.start.date()) + timedelta(days=1))
        else:
            event.add("dtstart", instance.start.astimezone(pytz.utc))
            if instance.end is not None:
                event.add("dtend", instance.end.astimezone(pytz.utc))

        if instance.location_id:
            event.add("location", self.location_names.get(instance.location_id, instance.location_id))
        if instance.description:
            event.add("description", instance.description)
        return event

    def build_calendar(self, instances: Iterable[UnrolledInstance]) -> Calendar:
        """Build the calendar component; cancelled instances are left out."""
        cal = Calendar()
        cal.add("prodid", PRODUCT_ID)
        cal.add("version", "2.0")
        cal.add("x-wr-calname", self.calendar_name)

        for instance in instances:
            if instance.is_cancelled:
                continue
            cal.add_component(self._event(instance))
        return cal

    def write(self, instances: Iterable[UnrolledInstance]) -> bytes:
        try:
            return self.build_calendar(instances).to_ical()
        except (TypeError, ValueError) as e:
            raise ExportError(f"Failed to render calendar: {e}") from e

    def write_file(self, path: Path, instances: Iterable[UnrolledInstance]) -> int:
        instances = [i for i in instances if not i.is_cancelled]
        if not instances:
            raise ExportError("No valid events to export")

        data = self.write(instances)
        try:
            Path(path).write_bytes(data)
        except OSError as e:
            raise ExportError(f"Failed to write {path}: {e}") from e

        logger.info(f"Exported {len(instances)} events to {path}")
        return len(instances)
