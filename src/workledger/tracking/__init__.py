"""Class/object lifecycle tracking over a shared Redis store."""

from __future__ import annotations

import time
from collections.abc import Callable

import redis

from workledger.persistence.transaction import OptimisticTransaction
from workledger.tracking.class_registry import ClassRegistry
from workledger.tracking.diff_engine import DiffEngine
from workledger.tracking.object_registry import ObjectRegistry


def create_tracker(
    session: redis.Redis,
    *,
    clock: Callable[[], float] = time.time,
) -> tuple[ClassRegistry, ObjectRegistry, DiffEngine]:
    """Create registries and a diff engine sharing one session.

    Returns:
        Tuple of (class_registry, object_registry, diff_engine).
    """
    classes = ClassRegistry(session, clock=clock)
    objects = ObjectRegistry(session, clock=clock)
    diff = DiffEngine(objects, OptimisticTransaction(session))
    return classes, objects, diff


__all__ = ["ClassRegistry", "DiffEngine", "ObjectRegistry", "create_tracker"]
