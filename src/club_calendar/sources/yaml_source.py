"""Snapshot source backed by a YAML or JSON export of the club database."""

import logging
from pathlib import Path
from typing import Any, Optional

import yaml

from ..models.appointment import AppointmentTemplate
from ..models.catalog import (
    AppointmentResponse,
    AppointmentType,
    Group,
    Location,
    MemberProfile,
)
from ..models.exception import AppointmentException
from ..utils.exceptions import SourceReadError
from .base import ExceptionSource, TemplateSource
from .records import parse_records

logger = logging.getLogger(__name__)

# Collection names as exported from the document store
APPOINTMENTS = "appointments"
EXCEPTIONS = "appointmentExceptions"
APPOINTMENT_TYPES = "appointmentTypes"
LOCATIONS = "locations"
GROUPS = "groups"
MEMBERS = "members"
RESPONSES = "appointmentResponses"


class YamlSnapshotSource(TemplateSource, ExceptionSource):
    """Read appointment collections from a snapshot file (YAML, or JSON)."""

    def __init__(self, path: Path):
        """
        Initialize snapshot source.

        Args:
            path: Snapshot file with one top-level key per collection
        """
        self.path = Path(path)
        self._data: Optional[dict[str, Any]] = None

    @property
    def data(self) -> dict[str, Any]:
        """Lazy-load the snapshot file."""
        if self._data is None:
            self._data = self._load()
        return self._data

    def _load(self) -> dict[str, Any]:
        try:
            with open(self.path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise SourceReadError(f"Failed to read snapshot {self.path}: {e}") from e
        except yaml.YAMLError as e:
            raise SourceReadError(f"Failed to parse snapshot {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise SourceReadError(
                f"Snapshot {self.path} must contain a mapping of collections"
            )

        logger.info(f"Loaded snapshot {self.path}")
        return data

    def _collection(self, name: str) -> list[Any]:
        records = self.data.get(name) or []
        if isinstance(records, dict):
            # Exports keyed by document id
            return [
                {"id": doc_id, **doc} if isinstance(doc, dict) else doc
                for doc_id, doc in records.items()
            ]
        if not isinstance(records, list):
            raise SourceReadError(f"Collection '{name}' in {self.path} is not a list")
        return records

    def read_templates(self) -> list[AppointmentTemplate]:
        templates = parse_records(self._collection(APPOINTMENTS), AppointmentTemplate, "appointment")
        logger.debug(f"Read {len(templates)} appointments from {self.path}")
        return templates

    def read_exceptions(self) -> list[AppointmentException]:
        return parse_records(
            self._collection(EXCEPTIONS), AppointmentException, "appointment exception"
        )

    def read_appointment_types(self) -> list[AppointmentType]:
        return parse_records(self._collection(APPOINTMENT_TYPES), AppointmentType, "appointment type")

    def read_locations(self) -> list[Location]:
        return parse_records(self._collection(LOCATIONS), Location, "location")

    def read_groups(self) -> list[Group]:
        return parse_records(self._collection(GROUPS), Group, "group")

    def read_members(self) -> list[MemberProfile]:
        records = []
        for raw in self._collection(MEMBERS):
            # Member documents are keyed by user id
            if isinstance(raw, dict) and "userId" not in raw and "user_id" not in raw and "id" in raw:
                raw = {"userId": raw["id"], **raw}
            records.append(raw)
        return parse_records(records, MemberProfile, "member")

    def read_responses(self) -> list[AppointmentResponse]:
        return parse_records(self._collection(RESPONSES), AppointmentResponse, "appointment response")
