"""Server-side credential management via CONFIG SET requirepass."""

from __future__ import annotations

import logging

import redis

from workledger.core.exceptions import InvalidArgumentError
from workledger.persistence.connection import connect, connect_secure, derive_password
from workledger.persistence.transaction import store_errors

logger = logging.getLogger(__name__)


class CredentialManager:
    """Set, reset and rotate the access credential for one database."""

    def __init__(self, endpoint: str, database: int, socket_timeout: float | None = None) -> None:
        self._endpoint = endpoint
        self._database = database
        self._socket_timeout = socket_timeout

    def _require_pass(self, client: redis.Redis, password: str) -> None:
        try:
            with store_errors("CONFIG SET requirepass"):
                client.config_set("requirepass", password)
        finally:
            client.close()

    def set_credential(self, credential: str) -> None:
        """Protect an open server with ``credential``."""
        if not credential:
            raise InvalidArgumentError("credential must be a non-empty string")
        client = connect(self._endpoint, self._database, socket_timeout=self._socket_timeout)
        self._require_pass(client, derive_password(self._database, credential))
        logger.info("Credential set for %s db=%s", self._endpoint, self._database)

    def reset_credential(self, credential: str) -> None:
        """Remove password protection, authenticating with the current ``credential``."""
        client = connect_secure(
            self._endpoint, self._database, credential, socket_timeout=self._socket_timeout,
        )
        self._require_pass(client, "")
        logger.info("Credential reset for %s db=%s", self._endpoint, self._database)

    def change_credential(self, old_credential: str, new_credential: str) -> None:
        """Rotate from ``old_credential`` to ``new_credential``."""
        if not new_credential:
            raise InvalidArgumentError("new credential must be a non-empty string")
        client = connect_secure(
            self._endpoint, self._database, old_credential, socket_timeout=self._socket_timeout,
        )
        self._require_pass(client, derive_password(self._database, new_credential))
        logger.info("Credential changed for %s db=%s", self._endpoint, self._database)
