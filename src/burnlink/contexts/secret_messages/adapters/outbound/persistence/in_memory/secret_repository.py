from __future__ import annotations

import threading
from datetime import datetime

from burnlink.contexts.secret_messages.application.ports.secret_repository import (
    SecretRecordPredicate,
    SecretRepository,
    SecretStoreUnavailableError,
)
from burnlink.contexts.secret_messages.domain.entities import SecretRecord
from burnlink.contexts.secret_messages.domain.value_objects import DestroyMode, SecretId

_DEFAULT_LOCK_TIMEOUT_SECONDS = 5.0


class InMemorySecretRepository(SecretRepository):
    """
    InMemorySecretRepository — process-local secret storage for dev runs and tests.

    Every operation runs under one lock acquisition, so fetch-and-delete is atomic
    across threads of one process. Not shared between processes.

    Related:
      - src/burnlink/contexts/secret_messages/application/ports/secret_repository.py
      - src/burnlink/contexts/secret_messages/adapters/outbound/persistence/postgres/
        secret_repository.py
      - apps/api/wiring/modules/secret_messages.py
    """

    def __init__(self, *, lock_timeout_seconds: float = _DEFAULT_LOCK_TIMEOUT_SECONDS) -> None:
        """
        Initialize empty rows map keyed by secret id string.

        Args:
            lock_timeout_seconds: Deadline for acquiring the storage lock.
        Returns:
            None.
        Assumptions:
            Timeout is positive.
        Raises:
            ValueError: If timeout is not positive.
        Side Effects:
            None.
        """
        if lock_timeout_seconds <= 0:
            raise ValueError("InMemorySecretRepository lock_timeout_seconds must be > 0")
        self._rows: dict[str, SecretRecord] = {}
        self._lock = threading.Lock()
        self._lock_timeout_seconds = lock_timeout_seconds

    def insert(self, *, record: SecretRecord) -> SecretRecord | None:
        key = str(record.secret_id)
        with self._locked():
            if key in self._rows:
                return None
            self._rows[key] = record
            return record

    def fetch_and_delete_if(
        self,
        *,
        secret_id: SecretId,
        predicate: SecretRecordPredicate,
    ) -> SecretRecord | None:
        """
        Pop record under lock and return it only when predicate holds.

        Args:
            secret_id: Public secret identifier.
            predicate: Disclosure check evaluated on the popped record.
        Returns:
            SecretRecord | None: Popped record or `None`.
        Assumptions:
            Predicate is cheap and free of storage calls.
        Raises:
            SecretStoreUnavailableError: If lock is not acquired before deadline.
        Side Effects:
            Removes at most one row.
        """
        with self._locked():
            record = self._rows.pop(str(secret_id), None)
            if record is None:
                return None
            if not predicate(record):
                return None
            return record

    def delete_expired_before(self, *, timestamp: datetime) -> int:
        with self._locked():
            expired_keys = [
                key
                for key, record in self._rows.items()
                if record.destroy_mode is DestroyMode.ON_EXPIRY and record.is_expired_at(timestamp)
            ]
            for key in expired_keys:
                del self._rows[key]
            return len(expired_keys)

    def count(self) -> int:
        with self._locked():
            return len(self._rows)

    def _locked(self) -> _AcquiredLock:
        if not self._lock.acquire(timeout=self._lock_timeout_seconds):
            raise SecretStoreUnavailableError(
                "InMemorySecretRepository lock was not acquired before deadline"
            )
        return _AcquiredLock(lock=self._lock)


class _AcquiredLock:
    """
    Context manager releasing an already acquired lock on exit.
    """

    def __init__(self, *, lock: threading.Lock) -> None:
        self._lock = lock

    def __enter__(self) -> None:
        return None

    def __exit__(self, *_exc_info: object) -> None:
        self._lock.release()
