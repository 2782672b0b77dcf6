"""Custom exceptions for Club Calendar application."""


class ClubCalendarError(Exception):
    """Base exception for club calendar errors."""


class SourceReadError(ClubCalendarError):
    """Raised when reading a snapshot source fails."""


class ExportError(ClubCalendarError):
    """Raised when exporting instances fails."""


class ConfigurationError(ClubCalendarError):
    """Raised when configuration is invalid."""


class SeriesEditError(ClubCalendarError):
    """Raised when a series edit cannot be planned."""
