# tests/test_date_utils.py
from datetime import date, datetime

import pytest
import pytz

from club_calendar.utils.date_utils import (
    add_months,
    coerce_datetime,
    coerce_end_day,
    get_horizon_end,
    get_timezone,
    local_day,
    month_bounds,
    months_between,
)
from club_calendar.utils.exceptions import ConfigurationError


def test_add_months_clamps_day_of_month():
    anchor = datetime(2024, 1, 31, 18, 0)

    assert add_months(anchor, 1) == datetime(2024, 2, 29, 18, 0)
    assert add_months(anchor, 2) == datetime(2024, 3, 31, 18, 0)
    assert add_months(anchor, 13) == datetime(2025, 2, 28, 18, 0)


def test_months_between():
    assert months_between(date(2024, 11, 30), date(2025, 2, 1)) == 3
    assert months_between(date(2025, 2, 1), date(2025, 2, 28)) == 0


def test_local_day_reads_naive_values_as_local(tz):
    assert local_day(datetime(2025, 1, 8, 0, 30), tz) == date(2025, 1, 8)
    assert local_day(datetime(2025, 1, 8, 23, 30, tzinfo=pytz.utc), tz) == date(2025, 1, 9)


def test_horizon_end_counts_today(tz, now):
    assert get_horizon_end(now, tz, 1) == date(2025, 1, 1)
    assert get_horizon_end(now, tz, 365) == date(2025, 12, 31)


def test_coerce_values():
    assert coerce_datetime(None) is None
    assert coerce_datetime("") is None
    assert coerce_datetime(date(2025, 1, 8)) == datetime(2025, 1, 8)
    assert coerce_datetime("2025-01-08T18:00:00+01:00").utcoffset().total_seconds() == 3600
    assert coerce_datetime({"_seconds": 0, "_nanoseconds": 5000}) == datetime(
        1970, 1, 1, 0, 0, 0, 5, tzinfo=pytz.utc
    )
    assert coerce_end_day("2025-01-22") == date(2025, 1, 22)
    assert coerce_end_day(date(2025, 1, 22)) == date(2025, 1, 22)
    assert coerce_end_day("2025-01-22T23:00:00") == datetime(2025, 1, 22, 23, 0)
    assert coerce_end_day(None) is None


def test_coerce_rejects_garbage():
    with pytest.raises(ValueError):
        coerce_datetime("next tuesday")
    with pytest.raises(ValueError):
        coerce_datetime(12.5)
    with pytest.raises(ValueError):
        coerce_datetime({"nanoseconds": 1})


def test_month_bounds():
    assert month_bounds("2024-02") == (date(2024, 2, 1), date(2024, 2, 29))
    with pytest.raises(ValueError):
        month_bounds("2024/02")


def test_unknown_timezone():
    with pytest.raises(ConfigurationError):
        get_timezone("Mars/Olympus")
