"""Redis session provider, with and without authentication."""

from __future__ import annotations

import logging
import zlib

import redis

from workledger.core.exceptions import (
    AuthenticationError,
    InvalidArgumentError,
    StoreUnavailableError,
)

logger = logging.getLogger(__name__)

DEFAULT_PORT = 6379


def derive_password(database: int, credential: str) -> str:
    """Hash a plain credential into the server-side password for ``database``.

    CRC-32 over ``str(database) + credential``, lowercase hex, no padding.
    """
    digest = zlib.crc32(f"{database}{credential}".encode("utf-8"))
    return format(digest, "x")


def parse_endpoint(endpoint: str) -> tuple[str, int]:
    """Split ``host[:port]`` into its parts."""
    host, sep, port = endpoint.rpartition(":")
    if not sep:
        host, port = endpoint, ""
    if not host:
        raise InvalidArgumentError(f"Endpoint has no host: {endpoint!r}")
    if not port:
        return host, DEFAULT_PORT
    try:
        return host, int(port)
    except ValueError as exc:
        raise InvalidArgumentError(f"Endpoint port is not a number: {endpoint!r}") from exc


def _open(
    endpoint: str,
    database: int,
    password: str | None,
    socket_timeout: float | None,
) -> redis.Redis:
    host, port = parse_endpoint(endpoint)
    client = redis.Redis(
        host=host,
        port=port,
        db=database,
        password=password,
        socket_timeout=socket_timeout,
        decode_responses=True,
    )
    try:
        client.ping()
    except redis.AuthenticationError as exc:
        raise AuthenticationError(f"Redis at {endpoint} rejected the credential for db={database}") from exc
    except redis.ResponseError as exc:
        # NOAUTH and friends come back as plain error replies on some servers
        if "auth" in str(exc).lower() or "password" in str(exc).lower():
            raise AuthenticationError(f"Redis at {endpoint} refused db={database}: {exc}") from exc
        raise StoreUnavailableError(f"Redis at {endpoint} refused db={database}: {exc}") from exc
    except redis.RedisError as exc:
        logger.warning("Cannot reach Redis at %s (db=%s): %s", endpoint, database, exc)
        raise StoreUnavailableError(f"Redis at {endpoint} unavailable: {exc}") from exc
    return client


def connect(endpoint: str, database: int, *, socket_timeout: float | None = None) -> redis.Redis:
    """Open an unauthenticated session bound to ``database``."""
    client = _open(endpoint, database, None, socket_timeout)
    logger.debug("Connected to %s db=%s", endpoint, database)
    return client


def connect_secure(
    endpoint: str,
    database: int,
    credential: str,
    *,
    socket_timeout: float | None = None,
) -> redis.Redis:
    """Open a session authenticated with ``credential``, bound to ``database``."""
    if not credential:
        raise InvalidArgumentError("credential must be a non-empty string")
    client = _open(endpoint, database, derive_password(database, credential), socket_timeout)
    logger.debug("Connected to %s db=%s with credential", endpoint, database)
    return client
