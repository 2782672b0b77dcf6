"""Tolerant parsing of raw snapshot records."""

import logging
from collections.abc import Iterable
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


def parse_records(
    raw_records: Iterable[Any],
    model: type[RecordT],
    kind: str,
) -> list[RecordT]:
    """
    Validate raw records, skipping the ones that do not fit the model.

    One bad document must not blank the whole calendar, so validation
    failures are logged and dropped instead of raised.

    Args:
        raw_records: Dicts (or already-built models) from a snapshot
        model: Pydantic model to validate against
        kind: Record kind used in log messages

    Returns:
        List of valid model instances in input order
    """
    result = []
    skipped = 0

    for index, raw in enumerate(raw_records):
        if isinstance(raw, model):
            result.append(raw)
            continue
        try:
            result.append(model.model_validate(raw))
        except ValidationError as e:
            skipped += 1
            record_id = raw.get("id", f"#{index}") if isinstance(raw, dict) else f"#{index}"
            logger.warning(
                f"Skipping invalid {kind} {record_id}: {e.error_count()} validation error(s)"
            )
            logger.debug(f"Validation details for {kind} {record_id}: {e}")

    if skipped:
        logger.info(f"Loaded {len(result)} {kind}(s), skipped {skipped}")
    return result
