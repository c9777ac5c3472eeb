from __future__ import annotations

from datetime import datetime
from typing import Callable, Protocol

from burnlink.contexts.secret_messages.domain.entities import SecretRecord
from burnlink.contexts.secret_messages.domain.value_objects import SecretId

SecretRecordPredicate = Callable[[SecretRecord], bool]


class SecretStoreUnavailableError(RuntimeError):
    """
    SecretStoreUnavailableError — storage backend failed or exceeded its deadline.

    Outcome of the interrupted operation is ambiguous: the caller must not assume
    the record is intact or destroyed.
    """


class SecretRepository(Protocol):
    """
    SecretRepository — storage port with the atomic fetch-and-delete primitive.

    Related:
      - src/burnlink/contexts/secret_messages/adapters/outbound/persistence/postgres/
        secret_repository.py
      - src/burnlink/contexts/secret_messages/adapters/outbound/persistence/in_memory/
        secret_repository.py
      - src/burnlink/contexts/secret_messages/application/use_cases/consume_secret.py
    """

    def insert(self, *, record: SecretRecord) -> SecretRecord | None:
        """
        Insert new record without ever overwriting an existing one.

        Args:
            record: Fully built encrypted record.
        Returns:
            SecretRecord | None: Stored record, or `None` when `secret_id` already exists.
        Assumptions:
            Insert is a single atomic write; failure leaves nothing behind.
        Raises:
            SecretStoreUnavailableError: If backend fails or times out.
        Side Effects:
            Writes one record.
        """
        ...

    def fetch_and_delete_if(
        self,
        *,
        secret_id: SecretId,
        predicate: SecretRecordPredicate,
    ) -> SecretRecord | None:
        """
        Atomically remove the record for `secret_id` and return it if `predicate` holds.

        Args:
            secret_id: Public secret identifier.
            predicate: Disclosure check evaluated on the removed record.
        Returns:
            SecretRecord | None: Removed record, or `None` when absent or rejected.
        Assumptions:
            Rejected records (past deadline) are purged in the same indivisible step;
            two concurrent callers never both receive the same record.
        Raises:
            SecretStoreUnavailableError: If backend fails or times out.
        Side Effects:
            Deletes at most one record.
        """
        ...

    def delete_expired_before(self, *, timestamp: datetime) -> int:
        """
        Delete on-expiry records whose deadline is at or before `timestamp`.

        Args:
            timestamp: Timezone-aware UTC cutoff.
        Returns:
            int: Number of deleted records.
        Assumptions:
            Used only for storage hygiene by the sweeper.
        Raises:
            SecretStoreUnavailableError: If backend fails or times out.
        Side Effects:
            Deletes zero or more records.
        """
        ...
