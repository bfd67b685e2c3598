"""Object registry: per-class in-process and processed sets, indexes, id counter."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

import redis
from redis.client import Pipeline

from workledger.core import keys
from workledger.models.records import ObjectRecord
from workledger.persistence.transaction import OptimisticTransaction, store_errors

logger = logging.getLogger(__name__)


class ObjectRegistry:
    """CRUD and state transitions for objects of one Redis session.

    An object sits in at most one of its class's in-process and processed
    sets; ``insert_processed`` moves it between them atomically. Once indexed
    an object stays in ``class:<id>:objects`` and ``object:<id>``.
    """

    def __init__(
        self,
        session: redis.Redis,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._session = session
        self._tx = OptimisticTransaction(session)
        self._clock = clock

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def new_object_id(self) -> str:
        """Advance the global counter and return its new value."""
        with store_errors("HINCRBY", keys.OBJECT_COUNTER):
            value = self._session.hincrby(keys.OBJECT_COUNTER, keys.OBJECT_COUNTER_FIELD, 1)
        return str(value)

    # ---- indexes ----

    def index_object(self, record: ObjectRecord, pipe: Pipeline | None = None) -> None:
        key = keys.object_key(record.object_id)
        keys.validate_identifier(record.class_id, "class_id")
        if pipe is not None:
            pipe.hset(key, "class_id", record.class_id)
            return
        with store_errors("HSET", key):
            self._session.hset(key, "class_id", record.class_id)

    def index_class_object(self, record: ObjectRecord, pipe: Pipeline | None = None) -> None:
        key = keys.class_objects_key(record.class_id)
        member = keys.validate_identifier(record.object_id, "object_id")
        if pipe is not None:
            pipe.sadd(key, member)
            return
        with store_errors("SADD", key):
            self._session.sadd(key, member)

    # ---- lifecycle ----

    def insert_in_process(self, record: ObjectRecord) -> None:
        """Start tracking ``record`` as in process and index it."""
        in_process_key = keys.objects_in_process_key(record.class_id)
        watch = [
            in_process_key,
            keys.object_key(record.object_id),
            keys.class_objects_key(record.class_id),
        ]
        started = self._now_ms()

        def build(pipe: Pipeline) -> None:
            pipe.zadd(in_process_key, {record.object_id: started})
            self.index_object(record, pipe)
            self.index_class_object(record, pipe)

        self._tx.execute(watch, build)
        logger.debug("Object %s of class %s in process", record.object_id, record.class_id)

    def insert_processed(self, record: ObjectRecord) -> None:
        """Move ``record`` from the in-process set to the processed set."""
        processed_key = keys.processed_objects_key(record.class_id)
        in_process_key = keys.objects_in_process_key(record.class_id)
        member = keys.validate_identifier(record.object_id, "object_id")
        finished = self._now_ms()

        def build(pipe: Pipeline) -> None:
            pipe.zadd(processed_key, {member: finished})
            pipe.zrem(in_process_key, member)

        self._tx.execute([processed_key, in_process_key], build)
        logger.debug("Object %s of class %s processed", record.object_id, record.class_id)

    # ---- reads ----

    def _members(self, key: str) -> set[str]:
        with store_errors("ZRANGE", key):
            return set(self._session.zrange(key, 0, -1))

    def get_in_process(self, class_id: str) -> set[str]:
        return self._members(keys.objects_in_process_key(class_id))

    def get_processed(self, class_id: str) -> set[str]:
        return self._members(keys.processed_objects_key(class_id))

    def get_all_objects(self, class_id: str) -> set[str]:
        """Every object currently tracked for ``class_id``, in process or processed."""
        return self.get_in_process(class_id) | self.get_processed(class_id)
