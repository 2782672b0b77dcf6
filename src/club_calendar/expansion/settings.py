"""Settings and window types for appointment expansion."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

DEFAULT_MAX_ITERATIONS = 500
DEFAULT_HORIZON_DAYS = 365
DEFAULT_TIMEZONE = "Europe/Berlin"


@dataclass(frozen=True)
class ExpansionSettings:
    """Configuration for recurrence unrolling.

    max_iterations bounds the occurrences generated per template;
    horizon_days clamps series without a recurrence end date.
    """

    max_iterations: int = DEFAULT_MAX_ITERATIONS
    horizon_days: int = DEFAULT_HORIZON_DAYS
    timezone: str = DEFAULT_TIMEZONE

    @classmethod
    def from_config(cls, config: Any) -> "ExpansionSettings":
        """Extract expansion settings from an AppConfig-like object.

        Args:
            config: Configuration object with expansion settings

        Returns:
            ExpansionSettings with values from config or defaults
        """
        return cls(
            max_iterations=getattr(config, "max_iterations", DEFAULT_MAX_ITERATIONS),
            horizon_days=getattr(config, "horizon_days", DEFAULT_HORIZON_DAYS),
            timezone=getattr(config, "timezone", DEFAULT_TIMEZONE),
        )


@dataclass(frozen=True)
class ExpansionWindow:
    """Time window of an expansion call, in local calendar days (inclusive)."""

    now: datetime
    start: Optional[date] = None
    end: Optional[date] = None

    def contains(self, day: date) -> bool:
        if self.start is not None and day < self.start:
            return False
        if self.end is not None and day > self.end:
            return False
        return True
