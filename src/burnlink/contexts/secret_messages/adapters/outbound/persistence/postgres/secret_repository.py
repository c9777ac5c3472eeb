from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping
from uuid import UUID

import psycopg

from burnlink.contexts.secret_messages.adapters.outbound.persistence.postgres.gateway import (
    SecretsPostgresGateway,
)
from burnlink.contexts.secret_messages.application.ports.secret_repository import (
    SecretRecordPredicate,
    SecretRepository,
    SecretStoreUnavailableError,
)
from burnlink.contexts.secret_messages.domain.entities import SecretRecord
from burnlink.contexts.secret_messages.domain.value_objects import DestroyMode, SecretId

_RECORD_COLUMNS = """
            secret_id,
            ciphertext,
            nonce,
            auth_tag,
            destroy_mode,
            expires_at,
            created_at
"""


class PostgresSecretRepository(SecretRepository):
    """
    PostgresSecretRepository — Postgres adapter for secret messages storage.

    Atomicity of consumption relies on one `DELETE ... RETURNING` statement: Postgres
    row locking lets exactly one concurrent statement delete and return the row.

    Related:
      - src/burnlink/contexts/secret_messages/application/ports/secret_repository.py
      - src/burnlink/contexts/secret_messages/adapters/outbound/persistence/postgres/gateway.py
      - alembic/versions/20261019_0001_secret_messages_v1.py
    """

    def __init__(
        self,
        *,
        gateway: SecretsPostgresGateway,
        table_name: str = "secret_messages",
    ) -> None:
        """
        Initialize repository with SQL gateway and target table name.

        Args:
            gateway: SQL gateway abstraction.
            table_name: Target secret messages table name.
        Returns:
            None.
        Assumptions:
            Table schema follows migration `20261019_0001_secret_messages_v1`.
        Raises:
            ValueError: If dependencies are invalid.
        Side Effects:
            None.
        """
        if gateway is None:  # type: ignore[truthy-bool]
            raise ValueError("PostgresSecretRepository requires gateway")
        normalized_table_name = table_name.strip()
        if not normalized_table_name:
            raise ValueError("PostgresSecretRepository requires non-empty table_name")
        self._gateway = gateway
        self._table_name = normalized_table_name

    def insert(self, *, record: SecretRecord) -> SecretRecord | None:
        """
        Insert record row; primary key conflict yields `None` instead of overwrite.

        Args:
            record: Encrypted record to persist.
        Returns:
            SecretRecord | None: Persisted record or `None` on duplicate `secret_id`.
        Assumptions:
            `ON CONFLICT DO NOTHING` never touches the existing row.
        Raises:
            SecretStoreUnavailableError: If driver fails or statement times out.
            ValueError: If returned row cannot be mapped.
        Side Effects:
            Executes one SQL insert statement.
        """
        query = f"""
        INSERT INTO {self._table_name}
        (
            secret_id,
            ciphertext,
            nonce,
            auth_tag,
            destroy_mode,
            expires_at,
            created_at
        )
        VALUES
        (
            %(secret_id)s,
            %(ciphertext)s,
            %(nonce)s,
            %(auth_tag)s,
            %(destroy_mode)s,
            %(expires_at)s,
            %(created_at)s
        )
        ON CONFLICT (secret_id) DO NOTHING
        RETURNING
{_RECORD_COLUMNS}
        """
        row = self._fetch_one(
            query=query,
            parameters={
                "secret_id": str(record.secret_id),
                "ciphertext": bytes(record.ciphertext),
                "nonce": bytes(record.nonce),
                "auth_tag": bytes(record.auth_tag),
                "destroy_mode": record.destroy_mode.value,
                "expires_at": record.expires_at,
                "created_at": record.created_at,
            },
        )
        if row is None:
            return None
        return _map_secret_record_row(row=row)

    def fetch_and_delete_if(
        self,
        *,
        secret_id: SecretId,
        predicate: SecretRecordPredicate,
    ) -> SecretRecord | None:
        """
        Delete row by id in one statement and return it when predicate holds.

        Args:
            secret_id: Public secret identifier.
            predicate: Disclosure check evaluated on the deleted row.
        Returns:
            SecretRecord | None: Deleted record, or `None` when absent or rejected.
        Assumptions:
            Row is deleted unconditionally; rejected rows are past their deadline and
            must be purged anyway. Deadline is also checked against database time taken
            after the row lock is held, so a statement blocked on the lock cannot
            disclose a row that expired meanwhile.
        Raises:
            SecretStoreUnavailableError: If driver fails or statement times out.
            ValueError: If deleted row cannot be mapped.
        Side Effects:
            Executes one SQL delete statement.
        """
        query = f"""
        DELETE FROM {self._table_name}
        WHERE secret_id = %(secret_id)s
        RETURNING
{_RECORD_COLUMNS},
            (expires_at IS NULL OR expires_at > clock_timestamp()) AS disclosable
        """
        row = self._fetch_one(query=query, parameters={"secret_id": str(secret_id)})
        if row is None:
            return None
        record = _map_secret_record_row(row=row)
        if not bool(row.get("disclosable", True)):
            return None
        if not predicate(record):
            return None
        return record

    def delete_expired_before(self, *, timestamp: datetime) -> int:
        """
        Delete on-expiry rows with deadline at or before `timestamp`.

        Args:
            timestamp: Timezone-aware UTC cutoff.
        Returns:
            int: Number of deleted rows.
        Assumptions:
            Partial index on `expires_at` keeps the scan bounded.
        Raises:
            SecretStoreUnavailableError: If driver fails or statement times out.
        Side Effects:
            Executes one SQL delete statement.
        """
        query = f"""
        WITH deleted AS (
            DELETE FROM {self._table_name}
            WHERE destroy_mode = 'on_expiry'
              AND expires_at <= %(timestamp)s
            RETURNING secret_id
        )
        SELECT COUNT(*) AS deleted_count FROM deleted
        """
        row = self._fetch_one(query=query, parameters={"timestamp": timestamp})
        if row is None:
            return 0
        return int(row["deleted_count"])

    def _fetch_one(self, *, query: str, parameters: Mapping[str, Any]) -> Mapping[str, Any] | None:
        try:
            return self._gateway.fetch_one(query=query, parameters=parameters)
        except psycopg.Error as error:
            raise SecretStoreUnavailableError(
                f"Secret messages storage failed: {type(error).__name__}"
            ) from error



def _map_secret_record_row(*, row: Mapping[str, Any]) -> SecretRecord:
    """
    Map SQL row mapping into immutable domain `SecretRecord`.

    Args:
        row: SQL result mapping.
    Returns:
        SecretRecord: Domain record.
    Assumptions:
        BYTEA columns may arrive as `memoryview`; timestamps arrive in session timezone.
    Raises:
        ValueError: If row fields are missing or malformed.
    Side Effects:
        None.
    """
    try:
        expires_raw = row["expires_at"]
        return SecretRecord(
            secret_id=SecretId(UUID(str(row["secret_id"]))),
            ciphertext=_to_bytes(value=row["ciphertext"]),
            nonce=_to_bytes(value=row["nonce"]),
            auth_tag=_to_bytes(value=row["auth_tag"]),
            destroy_mode=DestroyMode(str(row["destroy_mode"])),
            expires_at=_to_utc(value=expires_raw) if expires_raw is not None else None,
            created_at=_to_utc(value=row["created_at"]),
        )
    except (KeyError, TypeError, ValueError) as error:
        raise ValueError(f"Cannot map secret_messages row: {error}") from error


def _to_bytes(*, value: Any) -> bytes:
    if isinstance(value, memoryview):
        return value.tobytes()
    return bytes(value)


def _to_utc(*, value: datetime) -> datetime:
    if value.tzinfo is None:
        raise ValueError("secret_messages timestamps must be timezone-aware")
    return value.astimezone(timezone.utc)
