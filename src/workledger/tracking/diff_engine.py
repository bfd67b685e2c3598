"""Classify an observed snapshot of a class's objects as new or outdated."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from redis.client import Pipeline

from workledger.core import keys
from workledger.core.protocols import IObjectRegistry
from workledger.models.records import ObjectDiff
from workledger.persistence.transaction import OptimisticTransaction

logger = logging.getLogger(__name__)


def _as_set(observed: Iterable[str]) -> set[str]:
    if isinstance(observed, str):
        # a bare string would otherwise be split into characters
        return {observed}
    return set(observed)


class DiffEngine:
    """Set algebra between a caller's snapshot and the registry's tracked sets.

    * new = observed - (in process | processed)
    * outdated = processed - observed

    Nothing is cached; every call reads the sets from the store.
    """

    def __init__(self, objects: IObjectRegistry, transaction: OptimisticTransaction) -> None:
        self._objects = objects
        self._tx = transaction

    def new_objects(self, class_id: str, observed: Iterable[str]) -> set[str]:
        return _as_set(observed) - self._objects.get_all_objects(class_id)

    def outdated_objects(self, class_id: str, observed: Iterable[str]) -> set[str]:
        return self._objects.get_processed(class_id) - _as_set(observed)

    def diff(self, class_id: str, observed: Iterable[str]) -> ObjectDiff:
        """Compute both classifications from a single read of each set."""
        snapshot = _as_set(observed)
        in_process = self._objects.get_in_process(class_id)
        processed = self._objects.get_processed(class_id)
        return ObjectDiff(
            class_id=class_id,
            new=snapshot - (in_process | processed),
            outdated=processed - snapshot,
        )

    def remove_outdated_objects(self, class_id: str, observed: Iterable[str]) -> set[str]:
        """Drop processed objects missing from ``observed``; one transaction per object.

        Returns the ids removed. A conflict aborts at the object it hit;
        objects removed before it stay removed.
        """
        processed_key = keys.processed_objects_key(class_id)
        removed: set[str] = set()
        for object_id in sorted(self.outdated_objects(class_id, observed)):

            def build(pipe: Pipeline, member: str = object_id) -> None:
                pipe.zrem(processed_key, member)

            self._tx.execute([processed_key], build)
            removed.add(object_id)
        if removed:
            logger.debug("Removed %d outdated objects from class %s", len(removed), class_id)
        return removed
