"""Optimistic WATCH/MULTI/EXEC executor and Redis error translation."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from typing import Any

import redis
from redis.client import Pipeline

from workledger.core.exceptions import (
    AuthenticationError,
    RetryableConflictError,
    StoreError,
    StoreUnavailableError,
)

logger = logging.getLogger(__name__)

BatchBuilder = Callable[[Pipeline], None]


@contextmanager
def store_errors(operation: str, key: str = "") -> Iterator[None]:
    """Translate redis-py exceptions raised inside the block into WorkLedger errors."""
    try:
        yield
    except redis.AuthenticationError as exc:
        raise AuthenticationError(f"Redis {operation} rejected credential: {exc}") from exc
    except (redis.ConnectionError, redis.TimeoutError) as exc:
        logger.warning("Redis %s unavailable for key=%r: %s", operation, key, exc)
        raise StoreUnavailableError(f"Redis {operation} failed for key={key!r}: {exc}") from exc
    except redis.RedisError as exc:
        raise StoreError(f"Redis {operation} failed for key={key!r}: {exc}") from exc


class OptimisticTransaction:
    """Run one watch set plus one command batch as an all-or-nothing unit.

    ``execute`` never retries: a concurrent write to any watched key surfaces
    as :class:`RetryableConflictError` and the caller re-reads and decides.
    """

    def __init__(self, session: redis.Redis) -> None:
        self._session = session

    def execute(self, watch: Sequence[str], build: BatchBuilder) -> list[Any]:
        """WATCH ``watch``, queue the commands ``build`` adds, then EXEC.

        Returns the per-command replies of the committed batch.
        """
        watched = tuple(watch)
        with self._session.pipeline(transaction=True) as pipe:
            with store_errors("EXEC", ", ".join(watched)):
                try:
                    if watched:
                        pipe.watch(*watched)
                    pipe.multi()
                    build(pipe)
                    return pipe.execute()
                except redis.WatchError as exc:
                    logger.info("Transaction aborted, watched keys changed: %s", ", ".join(watched))
                    raise RetryableConflictError(watched) from exc
