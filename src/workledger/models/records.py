"""Class, object and diff records exchanged with the registries."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum, IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ClassStatus(IntEnum):
    IDLE = 0
    IN_PROCESS = 1


def encode_fields(fields: Mapping[str, Any]) -> dict[str, str | int | float]:
    """Flatten a field map into values Redis HSET accepts.

    ``None`` values are dropped; enums are written by value.
    """
    out: dict[str, str | int | float] = {}
    for key, value in fields.items():
        if value is None:
            continue
        if isinstance(value, Enum):
            value = value.value
        if isinstance(value, bool):
            value = int(value)
        if not isinstance(value, (str, int, float)):
            value = str(value)
        out[key] = value
    return out


class ClassRecord(BaseModel):
    """A work container as stored in ``class:<class_id>``.

    The hash is an open field map, so fields beyond the declared ones are kept.
    """

    model_config = ConfigDict(extra="allow")

    class_id: str
    class_type: str = ""
    status: ClassStatus = ClassStatus.IDLE

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, value: Any) -> Any:
        # Redis returns every hash value as a string
        if isinstance(value, str) and value.strip().isdigit():
            return int(value)
        return value

    @classmethod
    def from_hash(cls, fields: Mapping[str, Any]) -> ClassRecord:
        return cls.model_validate(dict(fields))

    def to_hash(self) -> dict[str, str | int | float]:
        return encode_fields(self.model_dump(exclude_unset=True))


class ObjectRecord(BaseModel):
    """A work item belonging to exactly one class."""

    object_id: str
    class_id: str


class ObjectDiff(BaseModel):
    """Reconciliation of an observed snapshot against tracked objects."""

    class_id: str
    new: set[str] = Field(default_factory=set)
    outdated: set[str] = Field(default_factory=set)

    @property
    def is_empty(self) -> bool:
        return not self.new and not self.outdated
