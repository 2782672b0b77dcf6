"""Display filters for unrolled appointment instances."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Protocol

import pytz

from ..models.appointment import VisibilityType
from ..models.catalog import AppointmentType
from ..models.instance import UnrolledInstance
from ..utils.date_utils import local_day, start_of_day


class CancellationMode(str, Enum):
    """How cancelled occurrences are treated."""

    HIDE = "hide"  # normal display
    ONLY = "only"  # absence review
    INCLUDE = "include"  # reporting


class InstanceFilter(Protocol):
    """Protocol for instance filters."""

    def matches(self, instance: UnrolledInstance) -> bool:
        """
        Determine if an instance should be kept.

        Args:
            instance: UnrolledInstance to evaluate

        Returns:
            True if the instance passes the filter, False otherwise
        """
        ...


class VisibilityFilter:
    """Keep instances the viewer's teams may see."""

    def __init__(self, viewer_team_ids: Iterable[str]):
        self.viewer_team_ids = set(viewer_team_ids)

    def matches(self, instance: UnrolledInstance) -> bool:
        return instance.visibility.is_visible_to(self.viewer_team_ids)


class CancellationFilter:
    """Drop or select cancelled instances."""

    def __init__(self, mode: CancellationMode = CancellationMode.HIDE):
        self.mode = mode

    def matches(self, instance: UnrolledInstance) -> bool:
        if self.mode == CancellationMode.HIDE:
            return not instance.is_cancelled
        if self.mode == CancellationMode.ONLY:
            return instance.is_cancelled
        return True


class TypeFilter:
    """Keep instances of the selected appointment types."""

    def __init__(self, type_ids: Iterable[str]):
        self.type_ids = set(type_ids)

    def matches(self, instance: UnrolledInstance) -> bool:
        return instance.appointment_type_id in self.type_ids


class TeamFilter:
    """Keep instances addressed to any selected team; club-wide ones always pass."""

    def __init__(self, team_ids: Iterable[str]):
        self.team_ids = set(team_ids)

    def matches(self, instance: UnrolledInstance) -> bool:
        if instance.visibility.type == VisibilityType.ALL:
            return True
        return any(team_id in self.team_ids for team_id in instance.visibility.team_ids)


def build_filters(
    viewer_team_ids: Optional[Iterable[str]] = None,
    cancellation: CancellationMode = CancellationMode.HIDE,
    type_ids: Optional[Iterable[str]] = None,
    team_ids: Optional[Iterable[str]] = None,
) -> list[InstanceFilter]:
    """
    Assemble the standard filter chain.

    Args:
        viewer_team_ids: Teams of the viewer (None skips the visibility check)
        cancellation: Treatment of cancelled instances
        type_ids: Selected appointment types (None keeps all)
        team_ids: Selected teams (None keeps all)

    Returns:
        Filters in evaluation order
    """
    filters: list[InstanceFilter] = []
    if viewer_team_ids is not None:
        filters.append(VisibilityFilter(viewer_team_ids))
    filters.append(CancellationFilter(cancellation))
    if type_ids is not None:
        filters.append(TypeFilter(type_ids))
    if team_ids is not None:
        filters.append(TeamFilter(team_ids))
    return filters


def sort_instances(instances: Iterable[UnrolledInstance]) -> list[UnrolledInstance]:
    """Sort by start; equal starts keep their input order."""
    return sorted(instances, key=lambda instance: instance.start)


def apply_filters(
    instances: Iterable[UnrolledInstance],
    filters: Iterable[InstanceFilter],
) -> list[UnrolledInstance]:
    """Keep the instances passing every filter, sorted by start."""
    filters = list(filters)
    return sort_instances(
        instance for instance in instances
        if all(f.matches(instance) for f in filters)
    )


def upcoming(
    instances: Iterable[UnrolledInstance],
    now: datetime,
    tz: pytz.BaseTzInfo,
    limit: Optional[int] = None,
) -> list[UnrolledInstance]:
    """
    Instances starting today or later, sorted by start.

    Args:
        instances: Filtered instances
        now: Current instant
        tz: Local timezone defining "today"
        limit: Maximum number of instances to return

    Returns:
        Prefix of the upcoming instances
    """
    today = start_of_day(local_day(now, tz), tz)
    result = sort_instances(i for i in instances if i.start >= today)
    return result if limit is None else result[:limit]


def resolve_type_ids(types: Iterable[AppointmentType], name: str) -> set[str]:
    """Ids of the appointment types whose name matches, ignoring case."""
    wanted = name.strip().lower()
    return {t.id for t in types if t.name.strip().lower() == wanted}


@dataclass
class DashboardSlots:
    """Upcoming instances split into the headline slot and everything else."""

    headline: list[UnrolledInstance] = field(default_factory=list)
    others: list[UnrolledInstance] = field(default_factory=list)


def split_headline(
    instances: Iterable[UnrolledInstance],
    headline_type_ids: set[str],
    headline_limit: int = 1,
    other_limit: int = 5,
) -> DashboardSlots:
    """
    Partition instances by the headline appointment type.

    Each partition keeps input order and is truncated independently.
    """
    slots = DashboardSlots()
    for instance in instances:
        if instance.appointment_type_id in headline_type_ids:
            slots.headline.append(instance)
        else:
            slots.others.append(instance)
    slots.headline = slots.headline[:headline_limit]
    slots.others = slots.others[:other_limit]
    return slots
