# tests/test_ics_writer.py
from datetime import date, datetime

import pytest

from club_calendar.models.appointment import Visibility
from club_calendar.models.instance import UnrolledInstance
from club_calendar.utils.exceptions import ExportError
from club_calendar.writers.ics_writer import IcsWriter


@pytest.fixture
def writer(now):
    return IcsWriter(
        now,
        location_names={"hall": "Sporthalle"},
        team_names={"A": "Herren 1"},
        headline_type_ids={"match"},
    )


def _instance(tz, **overrides) -> UnrolledInstance:
    fields = {
        "virtual_id": "training-2025-01-08",
        "original_id": "training",
        "original_day": date(2025, 1, 8),
        "title": "Training",
        "visibility": Visibility(),
        "start": tz.localize(datetime(2025, 1, 8, 18, 0)),
        "end": tz.localize(datetime(2025, 1, 8, 20, 0)),
        "location_id": "hall",
    }
    fields.update(overrides)
    return UnrolledInstance(**fields)


def test_timed_event_is_written_in_utc(writer, tz):
    data = writer.write([_instance(tz)])

    assert b"BEGIN:VCALENDAR" in data
    assert b"SUMMARY:Training" in data
    assert b"DTSTART:20250108T170000Z" in data
    assert b"DTEND:20250108T190000Z" in data
    assert b"LOCATION:Sporthalle" in data
    assert b"UID:training-2025-01-08@club-calendar" in data


def test_all_day_event_uses_dates(writer, tz):
    data = writer.write([_instance(tz, is_all_day=True)])

    assert b"DTSTART;VALUE=DATE:20250108" in data
    assert b"DTEND;VALUE=DATE:20250109" in data


def test_cancelled_instances_are_left_out(writer, tz):
    data = writer.write([_instance(tz, is_cancelled=True, title="Ausfall")])

    assert b"Ausfall" not in data
    assert b"BEGIN:VEVENT" not in data


def test_headline_title_names_teams(writer, tz):
    match = _instance(
        tz,
        title="Heimspiel",
        appointment_type_id="match",
        visibility=Visibility(type="specificTeams", team_ids=["A", "unknown"]),
    )

    assert writer.display_title(match) == "Heimspiel (Herren 1)"
    assert writer.display_title(_instance(tz)) == "Training"


def test_write_file(writer, tz, tmp_path):
    path = tmp_path / "kalender.ics"

    count = writer.write_file(path, [_instance(tz), _instance(tz, is_cancelled=True)])

    assert count == 1
    assert path.read_bytes().count(b"BEGIN:VEVENT") == 1


def test_write_file_without_events_raises(writer, tmp_path):
    with pytest.raises(ExportError):
        writer.write_file(tmp_path / "empty.ics", [])
