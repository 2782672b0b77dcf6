"""CLI entry point for Club Calendar application."""

import argparse
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from .config import config, snapshot_config
from .expansion.engine import AppointmentExpander
from .expansion.filters import CancellationMode, resolve_type_ids
from .expansion.settings import ExpansionSettings
from .models.instance import UnrolledInstance
from .sources.yaml_source import YamlSnapshotSource
from .stats.attendance import compute_team_stats
from .utils.date_utils import get_timezone, localize, month_bounds
from .utils.exceptions import ClubCalendarError
from .utils.logging import setup_logging
from .writers.ics_writer import IcsWriter

STATE_MARKERS = {
    "scheduled": "",
    "modified": " [geändert]",
    "cancelled": " [abgesagt]",
}


def _parse_day(value: Optional[str]):
    return datetime.strptime(value, "%Y-%m-%d").date() if value else None


def _print_instances(instances: list[UnrolledInstance], type_names: dict[str, str]) -> None:
    for instance in instances:
        when = instance.start.strftime("%Y-%m-%d") if instance.is_all_day else instance.start.strftime("%Y-%m-%d %H:%M")
        type_name = type_names.get(instance.appointment_type_id or "", "")
        print(f"  - {when}  {instance.title}{STATE_MARKERS[instance.state.value]}")
        if type_name:
            print(f"    Type: {type_name}")
        if instance.meeting_point or instance.meeting_time:
            print(f"    Meeting: {instance.meeting_point or ''} {instance.meeting_time or ''}".rstrip())
    print(f"\nTotal: {len(instances)} appointment(s)")


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Club Calendar - Expand recurring club appointments"
    )
    parser.add_argument(
        "--snapshot",
        type=Path,
        default=None,
        help="Snapshot file (YAML/JSON) with the club collections (default: from club_calendar.yaml)",
    )
    parser.add_argument(
        "--teams",
        nargs="*",
        default=None,
        help="Viewer team ids (default: from club_calendar.yaml)",
    )
    parser.add_argument(
        "--types",
        nargs="*",
        default=None,
        help="Only show these appointment type ids (a single one with --stats)",
    )
    parser.add_argument(
        "--now",
        type=str,
        default=None,
        help="Reference time in ISO format (default: current time)",
    )
    parser.add_argument(
        "--start-date",
        type=str,
        default=None,
        help="First day (YYYY-MM-DD format)",
    )
    parser.add_argument(
        "--end-date",
        type=str,
        default=None,
        help="Last day (YYYY-MM-DD format)",
    )
    parser.add_argument(
        "--cancelled",
        action="store_true",
        help="Show only cancelled occurrences",
    )
    parser.add_argument(
        "--dashboard",
        action="store_true",
        help="Show the next headline and regular appointments",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Show attendance statistics (requires --team and --month)",
    )
    parser.add_argument(
        "--team",
        type=str,
        default=None,
        help="Team id for statistics",
    )
    parser.add_argument(
        "--month",
        type=str,
        default=None,
        help="Month for statistics (YYYY-MM format)",
    )
    parser.add_argument(
        "--export-ics",
        type=Path,
        default=None,
        help="Write the shown appointments to an .ics file",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output",
    )

    args = parser.parse_args(argv)

    # Setup logging
    log_level = "DEBUG" if args.verbose else config.log_level
    logger = setup_logging(level=log_level, log_file=config.log_file)

    try:
        settings = ExpansionSettings.from_config(config)
        tz = get_timezone(settings.timezone)

        snapshot_path = args.snapshot or snapshot_config.snapshot
        if snapshot_path is None:
            logger.error("No snapshot given (use --snapshot or club_calendar.yaml)")
            return 1
        viewer_teams = args.teams if args.teams is not None else snapshot_config.viewer_teams

        try:
            now = localize(datetime.fromisoformat(args.now), tz) if args.now else datetime.now(tz)
            start = _parse_day(args.start_date)
            end = _parse_day(args.end_date)
        except ValueError as e:
            logger.error(f"Invalid date format. Use YYYY-MM-DD (e.g., 2025-01-08). Error: {e}")
            return 1

        source = YamlSnapshotSource(snapshot_path)
        expander = AppointmentExpander(source, source, settings)
        appointment_types = source.read_appointment_types()
        type_names = {t.id: t.name for t in appointment_types}
        headline_ids = resolve_type_ids(appointment_types, config.headline_type_name)

        # Attendance statistics
        if args.stats:
            if not args.team or not args.month:
                logger.error("--stats requires --team and --month")
                return 1
            if args.types and len(args.types) > 1:
                logger.error("--stats accepts a single appointment type in --types")
                return 1
            try:
                first_day, last_day = month_bounds(args.month)
                stats = compute_team_stats(
                    expander.unroll(now, window_start=first_day, window_end=last_day),
                    source.read_members(),
                    source.read_responses(),
                    team_id=args.team,
                    month=args.month,
                    tz=tz,
                    type_id=args.types[0] if args.types else None,
                )
            except ValueError as e:
                logger.error(f"Invalid month: {args.month}. Use YYYY-MM. Error: {e}")
                return 1

            print(f"\nAttendance {args.team} {args.month} ({len(stats.occurrences)} appointment(s)):")
            for member_stats in stats.members:
                counts = member_stats.counts
                print(
                    f"  - {member_stats.member.last_name}, {member_stats.member.first_name}: "
                    f"{counts.accepted} yes / {counts.declined} no / {counts.unsure} unsure / "
                    f"{counts.open} open ({counts.rate:.0f}%)"
                )
            print(f"\nTeam: {stats.totals.accepted}/{stats.totals.total} ({stats.totals.rate:.0f}%)")
            return 0

        # Dashboard
        if args.dashboard:
            slots = expander.dashboard(
                now,
                viewer_teams,
                headline_ids,
                headline_limit=config.headline_limit,
                other_limit=config.upcoming_limit,
            )
            print(f"\n=== {config.headline_type_name} ===")
            _print_instances(slots.headline, type_names)
            print("\n=== Next appointments ===")
            _print_instances(slots.others, type_names)
            return 0

        # Agenda or cancellation review
        mode = CancellationMode.ONLY if args.cancelled else CancellationMode.HIDE
        instances = expander.expand(
            now,
            viewer_team_ids=viewer_teams,
            window_start=start,
            window_end=end,
            cancellation=mode,
            type_ids=args.types,
        )

        if args.export_ics:
            groups = source.read_groups()
            writer = IcsWriter(
                now,
                calendar_name=snapshot_config.calendar_name,
                location_names={loc.id: loc.name for loc in source.read_locations()},
                team_names={g.id: g.name for g in groups if g.type == "team"},
                headline_type_ids=headline_ids,
            )
            count = writer.write_file(args.export_ics, instances)
            print(f"Exported {count} appointment(s) to {args.export_ics}")
            return 0

        print(f"\n=== {'Cancelled' if args.cancelled else 'Appointments'} ===")
        _print_instances(instances, type_names)
        return 0

    except ClubCalendarError as e:
        logger.error(f"Club calendar error: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
