# tests/test_config.py
from club_calendar.config import AppConfig, SnapshotConfig
from club_calendar.expansion.settings import ExpansionSettings


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("CLUB_CALENDAR_MAX_ITERATIONS", "1000")
    monkeypatch.setenv("CLUB_CALENDAR_TIMEZONE", "Europe/Vienna")

    settings = ExpansionSettings.from_config(AppConfig())

    assert settings.max_iterations == 1000
    assert settings.timezone == "Europe/Vienna"
    assert settings.horizon_days == 365


def test_snapshot_config_from_yaml(tmp_path):
    config_path = tmp_path / "club_calendar.yaml"
    config_path.write_text(
        "snapshot: data/export.yaml\nviewer:\n  teams: [A, 7]\n", encoding="utf-8"
    )

    snapshot_config = SnapshotConfig(config_path)

    assert snapshot_config.has_config
    assert snapshot_config.snapshot == (tmp_path / "data" / "export.yaml").resolve()
    assert snapshot_config.viewer_teams == ["A", "7"]


def test_missing_snapshot_config(tmp_path):
    snapshot_config = SnapshotConfig(tmp_path / "missing.yaml")

    assert not snapshot_config.has_config
    assert snapshot_config.viewer_teams == []
