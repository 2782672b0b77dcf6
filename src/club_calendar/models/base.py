"""Shared configuration for snapshot record models."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class SnapshotRecord(BaseModel):
    """Base for records read from the club's document store snapshots."""

    # Documents use camelCase keys; Python code uses snake_case names
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )
