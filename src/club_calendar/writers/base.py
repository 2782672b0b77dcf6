"""Abstract base class for instance writers."""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path

from ..models.instance import UnrolledInstance


class InstanceWriter(ABC):
    """Abstract base class for exporting unrolled instances."""

    @abstractmethod
    def write(self, instances: Iterable[UnrolledInstance]) -> bytes:
        """
        Render instances into the export format.

        Args:
            instances: Instances to export

        Returns:
            Encoded document

        Raises:
            ExportError: If rendering fails
        """

    @abstractmethod
    def write_file(self, path: Path, instances: Iterable[UnrolledInstance]) -> int:
        """
        Render instances into a file.

        Args:
            path: Target file
            instances: Instances to export

        Returns:
            Number of exported instances

        Raises:
            ExportError: If rendering or writing fails
        """
