# tests/conftest.py
from datetime import datetime
from typing import Any

import pytest
import pytz

from club_calendar.expansion.settings import ExpansionSettings
from club_calendar.models.appointment import AppointmentTemplate
from club_calendar.models.exception import AppointmentException

BERLIN = pytz.timezone("Europe/Berlin")


@pytest.fixture
def tz():
    return BERLIN


@pytest.fixture
def now():
    """Reference instant used instead of the system clock."""
    return BERLIN.localize(datetime(2025, 1, 1, 8, 0))


@pytest.fixture
def settings():
    return ExpansionSettings(max_iterations=500, horizon_days=365, timezone="Europe/Berlin")


@pytest.fixture
def make_template():
    """
    Factory for appointment templates from camelCase documents, the way
    they arrive from the club database.
    """

    def _make(**overrides: Any) -> AppointmentTemplate:
        doc = {
            "id": "training",
            "title": "Training",
            "startDate": datetime(2025, 1, 1, 18, 0),
            "endDate": datetime(2025, 1, 1, 20, 0),
            "isAllDay": False,
            "appointmentTypeId": "type-training",
            "locationId": "hall",
            "recurrence": "none",
            "visibility": {"type": "all", "teamIds": []},
        }
        doc.update(overrides)
        return AppointmentTemplate.model_validate(doc)

    return _make


@pytest.fixture
def make_exception():
    def _make(**overrides: Any) -> AppointmentException:
        doc = {
            "id": "ex-1",
            "originalAppointmentId": "training",
            "originalDate": datetime(2025, 1, 8),
            "status": "cancelled",
        }
        doc.update(overrides)
        return AppointmentException.model_validate(doc)

    return _make
