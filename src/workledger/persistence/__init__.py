"""Redis session, credential and transaction plumbing."""

from __future__ import annotations

import redis

from workledger.core.config import AppSettings
from workledger.persistence.connection import connect, connect_secure


def open_session(settings: AppSettings | None = None) -> redis.Redis:
    """Open a session from application settings.

    Authenticates when ``settings.store.credential`` is set.
    """
    if settings is None:
        settings = AppSettings()

    store = settings.store
    if store.credential:
        return connect_secure(
            store.endpoint, store.db, store.credential, socket_timeout=store.socket_timeout,
        )
    return connect(store.endpoint, store.db, socket_timeout=store.socket_timeout)
