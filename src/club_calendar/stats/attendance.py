"""Attendance statistics per team and month."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Optional

import pytz

from ..models.catalog import AppointmentResponse, MemberProfile, ResponseStatus
from ..models.instance import UnrolledInstance
from ..utils.date_utils import local_day, month_bounds

logger = logging.getLogger(__name__)


@dataclass
class AttendanceCounts:
    """Response tallies over a set of occurrences."""

    accepted: int = 0
    declined: int = 0
    unsure: int = 0
    open: int = 0
    total: int = 0

    @property
    def rate(self) -> float:
        """Share of accepted occurrences in percent."""
        return self.accepted / self.total * 100 if self.total else 0.0

    def add(self, status: Optional[ResponseStatus]) -> None:
        self.total += 1
        if status == ResponseStatus.ACCEPTED:
            self.accepted += 1
        elif status == ResponseStatus.DECLINED:
            self.declined += 1
        elif status == ResponseStatus.UNSURE:
            self.unsure += 1
        else:
            self.open += 1


@dataclass
class MemberStats:
    """Attendance of one member."""

    member: MemberProfile
    counts: AttendanceCounts = field(default_factory=AttendanceCounts)


@dataclass
class TeamStats:
    """Attendance of a team in one month."""

    team_id: str
    month: str
    occurrences: list[UnrolledInstance] = field(default_factory=list)
    members: list[MemberStats] = field(default_factory=list)
    totals: AttendanceCounts = field(default_factory=AttendanceCounts)


def compute_team_stats(
    instances: Iterable[UnrolledInstance],
    members: Iterable[MemberProfile],
    responses: Iterable[AppointmentResponse],
    team_id: str,
    month: str,
    tz: pytz.BaseTzInfo,
    type_id: Optional[str] = None,
) -> TeamStats:
    """
    Compute attendance statistics of a team for one month.

    Only non-cancelled occurrences visible to the team count. Responses are
    matched by (user id, template id, original day), so an occurrence moved
    by an exception keeps its answers.

    Args:
        instances: Unrolled occurrences (cancelled ones included or not)
        members: All club members
        responses: All RSVP responses
        team_id: Team to report on
        month: Month in YYYY-MM format
        tz: Local timezone defining the month's days
        type_id: Restrict to one appointment type

    Returns:
        TeamStats with members sorted by last name

    Raises:
        ValueError: If month is not in YYYY-MM format
    """
    first_day, last_day = month_bounds(month)
    stats = TeamStats(team_id=team_id, month=month)

    stats.occurrences = [
        instance for instance in instances
        if not instance.is_cancelled
        and instance.visibility.is_visible_to({team_id})
        and first_day <= local_day(instance.start, tz) <= last_day
        and (type_id is None or instance.appointment_type_id == type_id)
    ]

    team_members = [m for m in members if team_id in m.teams]
    if not team_members:
        logger.info(f"Team {team_id} has no members")
        return stats

    answers = {
        (r.user_id, r.appointment_id, r.date): r.status
        for r in responses
    }

    for member in sorted(team_members, key=lambda m: (m.last_name.lower(), m.first_name.lower())):
        member_stats = MemberStats(member=member)
        for instance in stats.occurrences:
            status = answers.get(instance.response_key(member.user_id))
            member_stats.counts.add(status)
            stats.totals.add(status)
        stats.members.append(member_stats)

    logger.debug(
        f"Team {team_id} {month}: {len(stats.occurrences)} occurrences, "
        f"{len(stats.members)} members"
    )
    return stats
