"""In-memory snapshot source."""

from collections.abc import Iterable
from typing import Any, Optional

from ..models.appointment import AppointmentTemplate
from ..models.exception import AppointmentException
from .base import ExceptionSource, TemplateSource
from .records import parse_records


class InMemorySource(TemplateSource, ExceptionSource):
    """Serve templates and exceptions that the caller already fetched."""

    def __init__(
        self,
        templates: Optional[Iterable[Any]] = None,
        exceptions: Optional[Iterable[Any]] = None,
    ):
        """
        Initialize in-memory source.

        Args:
            templates: Template records (dicts or AppointmentTemplate)
            exceptions: Exception records (dicts or AppointmentException)
        """
        self._templates = parse_records(templates or [], AppointmentTemplate, "appointment")
        self._exceptions = parse_records(
            exceptions or [], AppointmentException, "appointment exception"
        )

    def read_templates(self) -> list[AppointmentTemplate]:
        return list(self._templates)

    def read_exceptions(self) -> list[AppointmentException]:
        return list(self._exceptions)
