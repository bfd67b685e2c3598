"""Class registry: status hashes, the monitored queue and the in-process set."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from typing import Any

import redis
from redis.client import Pipeline

from workledger.core import keys
from workledger.core.exceptions import InvalidArgumentError, NoneAvailableError, NotFoundError
from workledger.models.records import ClassRecord, ClassStatus, encode_fields
from workledger.persistence.transaction import OptimisticTransaction, store_errors

logger = logging.getLogger(__name__)


class ClassRegistry:
    """CRUD and state transitions for classes of one Redis session.

    A class is in ``classes-in-process:<type>`` exactly when its hash has
    ``status = 1``; ``process_class`` and ``remove_class`` change both in one
    watched transaction. Mutating calls may raise
    :class:`~workledger.core.exceptions.RetryableConflictError`.
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

    # ---- reads ----

    def _read_hash(self, class_id: str) -> dict[str, str]:
        key = keys.class_key(class_id)
        with store_errors("HGETALL", key):
            try:
                return self._session.hgetall(key)
            except redis.ResponseError as exc:
                # WRONGTYPE: something other than a class hash lives here
                raise NotFoundError("class", class_id) from exc

    def get_class(self, class_id: str) -> ClassRecord:
        fields = self._read_hash(class_id)
        if not fields:
            raise NotFoundError("class", class_id)
        return ClassRecord.from_hash(fields)

    def take_new_classes(self, n: int, class_type: str) -> list[ClassRecord]:
        """Return up to ``n`` monitored classes, lowest score first.

        A class queued by score alone has no hash yet and comes back idle.
        Every record carries ``class_type`` so it can be passed to
        :meth:`process_class` as is.
        """
        if isinstance(n, bool) or not isinstance(n, int) or n < 1:
            raise InvalidArgumentError(f"n must be a positive integer, got {n!r}")
        key = keys.classes_monitored_key(class_type)
        with store_errors("ZRANGEBYSCORE", key):
            class_ids = self._session.zrangebyscore(key, "-inf", "+inf", start=0, num=n)
        if not class_ids:
            raise NoneAvailableError(class_type)

        records = []
        for class_id in class_ids:
            fields = self._read_hash(class_id)
            if not fields:
                records.append(ClassRecord(class_id=class_id, class_type=class_type))
                continue
            record = ClassRecord.from_hash({"class_id": class_id, **fields})
            if not record.class_type:
                record = record.model_copy(update={"class_type": class_type})
            records.append(record)
        return records

    def check_class_score(self, class_id: str, class_type: str) -> float:
        key = keys.classes_monitored_key(class_type)
        member = keys.validate_identifier(class_id, "class_id")
        with store_errors("ZSCORE", key):
            score = self._session.zscore(key, member)
        if score is None:
            raise NotFoundError("monitored class", class_id)
        return score

    # ---- writes ----

    def update_class_status(self, fields: Mapping[str, Any]) -> None:
        """Write ``fields`` onto the class hash without a watch."""
        key = keys.class_key(fields.get("class_id"))
        with store_errors("HSET", key):
            self._session.hset(key, mapping=encode_fields(fields))

    def process_class(self, record: ClassRecord) -> None:
        """Claim ``record``: add it to the in-process set and mark ``status = 1``."""
        class_key = keys.class_key(record.class_id)
        in_process_key = keys.classes_in_process_key(record.class_type)
        started = self._now_ms()

        def build(pipe: Pipeline) -> None:
            pipe.zadd(in_process_key, {record.class_id: started})
            pipe.hset(class_key, mapping={"class_id": record.class_id, "status": int(ClassStatus.IN_PROCESS)})

        self._tx.execute([class_key], build)
        logger.debug("Class %s claimed (%s) at %d", record.class_id, record.class_type, started)

    def remove_class(self, class_id: str, class_type: str) -> None:
        """Release a claimed class: drop it from the in-process set and mark ``status = 0``."""
        class_key = keys.class_key(class_id)
        in_process_key = keys.classes_in_process_key(class_type)

        def build(pipe: Pipeline) -> None:
            pipe.zrem(in_process_key, class_id)
            pipe.hset(class_key, mapping={"class_id": class_id, "status": int(ClassStatus.IDLE)})

        self._tx.execute([in_process_key], build)
        logger.debug("Class %s released (%s)", class_id, class_type)

    def update_class_score(self, class_id: str, score: float, class_type: str) -> None:
        """Re-score ``class_id`` in the monitored queue, adding it if absent."""
        member = keys.validate_identifier(class_id, "class_id")
        monitored_key = keys.classes_monitored_key(class_type)
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            raise InvalidArgumentError(f"score must be a number, got {score!r}")

        def build(pipe: Pipeline) -> None:
            pipe.zadd(monitored_key, {member: score})

        self._tx.execute([monitored_key], build)
        logger.debug("Class %s rescheduled in %s with score %s", class_id, class_type, score)

    def update_class(self, record: ClassRecord) -> None:
        """Overwrite the class hash with every field of ``record``."""
        class_key = keys.class_key(record.class_id)
        fields = record.to_hash()

        def build(pipe: Pipeline) -> None:
            pipe.hset(class_key, mapping=fields)

        self._tx.execute([class_key], build)
