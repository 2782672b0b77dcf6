"""Abstract snapshot providers for appointment data."""

from abc import ABC, abstractmethod

from ..models.appointment import AppointmentTemplate
from ..models.exception import AppointmentException


class TemplateSource(ABC):
    """Read-only provider of appointment templates."""

    @abstractmethod
    def read_templates(self) -> list[AppointmentTemplate]:
        """
        Read all appointment templates.

        Returns:
            List of valid AppointmentTemplate objects; invalid records are skipped

        Raises:
            SourceReadError: If the underlying snapshot cannot be read
        """


class ExceptionSource(ABC):
    """Read-only provider of per-occurrence exceptions."""

    @abstractmethod
    def read_exceptions(self) -> list[AppointmentException]:
        """
        Read all appointment exceptions.

        Returns:
            List of valid AppointmentException objects; invalid records are skipped

        Raises:
            SourceReadError: If the underlying snapshot cannot be read
        """
