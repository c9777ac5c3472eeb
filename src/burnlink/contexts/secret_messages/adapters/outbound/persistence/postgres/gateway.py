from __future__ import annotations

import math
from typing import Any, Mapping, Protocol, cast

import psycopg
from psycopg.rows import dict_row

_DEFAULT_TIMEOUT_SECONDS = 5.0
_MIN_CONNECT_TIMEOUT_SECONDS = 2


class SecretsPostgresGateway(Protocol):
    """
    SecretsPostgresGateway — minimal SQL gateway for secret messages Postgres adapters.

    Related:
      - src/burnlink/contexts/secret_messages/adapters/outbound/persistence/postgres/
        secret_repository.py
      - alembic/versions/20261019_0001_secret_messages_v1.py
      - apps/api/wiring/modules/secret_messages.py
    """

    def fetch_one(self, *, query: str, parameters: Mapping[str, Any]) -> Mapping[str, Any] | None:
        """
        Execute one SQL statement and return its first row as mapping.

        Args:
            query: SQL text.
            parameters: Bind parameters mapping.
        Returns:
            Mapping[str, Any] | None: One row or `None`.
        Assumptions:
            Statement may be a write with `RETURNING` clause; it commits on success.
        Raises:
            Exception: Storage/driver exceptions from implementation.
        Side Effects:
            Executes one SQL statement.
        """
        ...


class PsycopgSecretsPostgresGateway(SecretsPostgresGateway):
    """
    PsycopgSecretsPostgresGateway — psycopg3 gateway with bounded connect and statement time.

    Related:
      - src/burnlink/contexts/secret_messages/adapters/outbound/persistence/postgres/gateway.py
      - apps/api/wiring/modules/secret_messages.py
      - apps/worker/secrets_sweeper/wiring/modules/secrets_sweeper.py
    """

    def __init__(self, *, dsn: str, timeout_seconds: float = _DEFAULT_TIMEOUT_SECONDS) -> None:
        """
        Initialize gateway with DSN and per-operation deadline.

        Args:
            dsn: PostgreSQL DSN.
            timeout_seconds: Deadline applied to connect and to statement execution.
        Returns:
            None.
        Assumptions:
            DSN points to database migrated with `secret_messages` table.
        Raises:
            ValueError: If DSN is blank or timeout is not positive.
        Side Effects:
            None.
        """
        normalized_dsn = dsn.strip()
        if not normalized_dsn:
            raise ValueError("PsycopgSecretsPostgresGateway requires non-empty dsn")
        if timeout_seconds <= 0:
            raise ValueError("PsycopgSecretsPostgresGateway timeout_seconds must be > 0")
        self._dsn = normalized_dsn
        self._connect_timeout = max(math.ceil(timeout_seconds), _MIN_CONNECT_TIMEOUT_SECONDS)
        self._statement_timeout_ms = max(int(timeout_seconds * 1000), 1)

    def fetch_one(self, *, query: str, parameters: Mapping[str, Any]) -> Mapping[str, Any] | None:
        """
        Execute statement in its own transaction and return first row.

        Args:
            query: SQL text.
            parameters: Bind parameters mapping.
        Returns:
            Mapping[str, Any] | None: Query row or `None`.
        Assumptions:
            psycopg connection context commits on success and rolls back on error.
        Raises:
            psycopg.Error: When database operation fails or exceeds `statement_timeout`.
        Side Effects:
            Opens one database connection and executes one statement.
        """
        with psycopg.connect(
            self._dsn,
            row_factory=cast(Any, dict_row),
            connect_timeout=self._connect_timeout,
            options=f"-c statement_timeout={self._statement_timeout_ms}",
        ) as connection:
            with connection.cursor() as cursor:
                cursor.execute(cast(Any, query), parameters)
                row = cursor.fetchone()
        if row is None:
            return None
        return dict(row)
