"""Protocol interfaces for WorkLedger abstractions.

Structural typing, no inheritance required, easy to test with isinstance().
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Protocol, runtime_checkable

from workledger.models.records import ClassRecord, ObjectDiff, ObjectRecord


# ---------------------------------------------------------------------------
# Class Registry
# ---------------------------------------------------------------------------

@runtime_checkable
class IClassRegistry(Protocol):
    """Class status hashes, monitored queue and in-process set."""

    def get_class(self, class_id: str) -> ClassRecord: ...

    def take_new_classes(self, n: int, class_type: str) -> list[ClassRecord]: ...

    def update_class_status(self, fields: Mapping[str, Any]) -> None: ...

    def process_class(self, record: ClassRecord) -> None: ...

    def remove_class(self, class_id: str, class_type: str) -> None: ...

    def update_class_score(self, class_id: str, score: float, class_type: str) -> None: ...

    def check_class_score(self, class_id: str, class_type: str) -> float: ...

    def update_class(self, record: ClassRecord) -> None: ...


# ---------------------------------------------------------------------------
# Object Registry
# ---------------------------------------------------------------------------

@runtime_checkable
class IObjectRegistry(Protocol):
    """Per-class object sets, indexes and the global id counter."""

    def new_object_id(self) -> str: ...

    def index_object(self, record: ObjectRecord) -> None: ...

    def index_class_object(self, record: ObjectRecord) -> None: ...

    def insert_in_process(self, record: ObjectRecord) -> None: ...

    def get_in_process(self, class_id: str) -> set[str]: ...

    def insert_processed(self, record: ObjectRecord) -> None: ...

    def get_processed(self, class_id: str) -> set[str]: ...

    def get_all_objects(self, class_id: str) -> set[str]: ...


# ---------------------------------------------------------------------------
# Diff Engine
# ---------------------------------------------------------------------------

@runtime_checkable
class IDiffEngine(Protocol):
    """New/outdated classification of observed object snapshots."""

    def new_objects(self, class_id: str, observed: Iterable[str]) -> set[str]: ...

    def outdated_objects(self, class_id: str, observed: Iterable[str]) -> set[str]: ...

    def diff(self, class_id: str, observed: Iterable[str]) -> ObjectDiff: ...

    def remove_outdated_objects(self, class_id: str, observed: Iterable[str]) -> set[str]: ...


# ---------------------------------------------------------------------------
# Credential Manager
# ---------------------------------------------------------------------------

@runtime_checkable
class ICredentialManager(Protocol):
    """Server-side credential administration for one database."""

    def set_credential(self, credential: str) -> None: ...

    def reset_credential(self, credential: str) -> None: ...

    def change_credential(self, old_credential: str, new_credential: str) -> None: ...
