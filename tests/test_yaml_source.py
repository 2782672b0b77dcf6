# tests/test_yaml_source.py
import json
from datetime import date

import pytest

from club_calendar.sources.yaml_source import YamlSnapshotSource
from club_calendar.utils.exceptions import SourceReadError

SNAPSHOT = """
appointments:
  - id: training
    title: Training
    startDate: 2025-01-01T18:00:00
    endDate: 2025-01-01T20:00:00
    recurrence: weekly
    recurrenceEndDate: 2025-01-22
    appointmentTypeId: type-training
    visibility:
      type: specificTeams
      teamIds: [A]
  - id: broken
    title: Broken
    startDate: yesterday-ish
appointmentExceptions:
  - id: ex-1
    originalAppointmentId: training
    originalDate: 2025-01-08
    status: modified
    modifiedData:
      title: Verlegt
appointmentTypes:
  type-training:
    name: Training
members:
  - id: u1
    firstName: Anna
    lastName: Berg
    teams: [A]
appointmentResponses:
  - userId: u1
    appointmentId: training
    date: 2025-01-08
    status: zugesagt
"""


@pytest.fixture
def snapshot(tmp_path):
    path = tmp_path / "snapshot.yaml"
    path.write_text(SNAPSHOT, encoding="utf-8")
    return YamlSnapshotSource(path)


def test_reads_templates_and_skips_invalid(snapshot):
    templates = snapshot.read_templates()

    assert [t.id for t in templates] == ["training"]
    assert templates[0].recurrence_end_date == date(2025, 1, 22)
    assert templates[0].visibility.team_ids == ["A"]


def test_reads_exceptions_with_overlay(snapshot):
    exceptions = snapshot.read_exceptions()

    assert len(exceptions) == 1
    assert exceptions[0].modified_data.overrides() == {"title": "Verlegt"}


def test_reads_collections_keyed_by_document_id(snapshot):
    types = snapshot.read_appointment_types()
    members = snapshot.read_members()

    assert [(t.id, t.name) for t in types] == [("type-training", "Training")]
    assert members[0].user_id == "u1"
    assert snapshot.read_responses()[0].date == "2025-01-08"


def test_missing_collections_are_empty(snapshot):
    assert snapshot.read_locations() == []
    assert snapshot.read_groups() == []


def test_reads_json_snapshot(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text(
        json.dumps({"appointments": [{"id": "a", "title": "A", "startDate": "2025-01-01T18:00:00"}]}),
        encoding="utf-8",
    )

    assert [t.id for t in YamlSnapshotSource(path).read_templates()] == ["a"]


def test_missing_file_raises(tmp_path):
    source = YamlSnapshotSource(tmp_path / "missing.yaml")

    with pytest.raises(SourceReadError):
        source.read_templates()


def test_malformed_yaml_raises(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("appointments: [unclosed", encoding="utf-8")

    with pytest.raises(SourceReadError):
        YamlSnapshotSource(path).read_exceptions()


def test_non_mapping_snapshot_raises(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(SourceReadError):
        YamlSnapshotSource(path).read_templates()
