from __future__ import annotations

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from burnlink.contexts.secret_messages.adapters.outbound import InMemorySecretRepository
from burnlink.contexts.secret_messages.application.ports import SecretStoreUnavailableError
from burnlink.contexts.secret_messages.domain import DestroyMode, SecretId, SecretRecord

_NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


def _record(*, expires_in_seconds: float | None = None) -> SecretRecord:
    destroy_mode = DestroyMode.ON_READ if expires_in_seconds is None else DestroyMode.ON_EXPIRY
    return SecretRecord(
        secret_id=SecretId(uuid4()),
        ciphertext=b"ciphertext",
        nonce=b"\x00" * 12,
        auth_tag=b"\x00" * 16,
        destroy_mode=destroy_mode,
        expires_at=(
            _NOW + timedelta(seconds=expires_in_seconds) if expires_in_seconds is not None else None
        ),
        created_at=_NOW,
    )


def test_insert_rejects_duplicate_id_without_overwrite() -> None:
    repository = InMemorySecretRepository()
    original = _record()
    duplicate = SecretRecord(
        secret_id=original.secret_id,
        ciphertext=b"other",
        nonce=original.nonce,
        auth_tag=original.auth_tag,
        destroy_mode=original.destroy_mode,
        expires_at=None,
        created_at=_NOW,
    )

    assert repository.insert(record=original) == original
    assert repository.insert(record=duplicate) is None

    taken = repository.fetch_and_delete_if(secret_id=original.secret_id, predicate=lambda _r: True)
    assert taken is not None
    assert taken.ciphertext == b"ciphertext"


def test_fetch_and_delete_returns_record_once() -> None:
    """
    Verify fetch-and-delete removes the record so a second call finds nothing.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Predicate accepting every record models a live on-read secret.
    Raises:
        AssertionError: If record survives first consumption.
    Side Effects:
        None.
    """
    repository = InMemorySecretRepository()
    record = _record()
    repository.insert(record=record)

    first = repository.fetch_and_delete_if(secret_id=record.secret_id, predicate=lambda _r: True)
    second = repository.fetch_and_delete_if(secret_id=record.secret_id, predicate=lambda _r: True)

    assert first == record
    assert second is None
    assert repository.count() == 0


def test_fetch_and_delete_purges_record_rejected_by_predicate() -> None:
    repository = InMemorySecretRepository()
    record = _record(expires_in_seconds=1)
    repository.insert(record=record)

    rejected = repository.fetch_and_delete_if(
        secret_id=record.secret_id,
        predicate=lambda candidate: candidate.is_disclosable_at(_NOW + timedelta(seconds=2)),
    )

    assert rejected is None
    assert repository.count() == 0


def test_fetch_and_delete_returns_none_for_unknown_id() -> None:
    repository = InMemorySecretRepository()

    taken = repository.fetch_and_delete_if(secret_id=SecretId(uuid4()), predicate=lambda _r: True)

    assert taken is None


def test_delete_expired_before_removes_only_due_on_expiry_records() -> None:
    repository = InMemorySecretRepository()
    due = _record(expires_in_seconds=10)
    due_exactly_now = _record(expires_in_seconds=20)
    not_due = _record(expires_in_seconds=30)
    on_read = _record()
    for record in (due, due_exactly_now, not_due, on_read):
        repository.insert(record=record)

    purged = repository.delete_expired_before(timestamp=_NOW + timedelta(seconds=20))

    assert purged == 2
    assert repository.count() == 2
    assert repository.fetch_and_delete_if(secret_id=not_due.secret_id, predicate=lambda _r: True)
    assert repository.fetch_and_delete_if(secret_id=on_read.secret_id, predicate=lambda _r: True)


def test_operations_fail_with_store_unavailable_when_lock_deadline_passes() -> None:
    """
    Verify storage operations surface deadline failure instead of blocking forever.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Holding the internal lock simulates a stuck concurrent operation.
    Raises:
        AssertionError: If operation succeeds while lock is held.
    Side Effects:
        Acquires and releases repository lock.
    """
    repository = InMemorySecretRepository(lock_timeout_seconds=0.01)
    record = _record()

    repository._lock.acquire()
    try:
        with pytest.raises(SecretStoreUnavailableError):
            repository.insert(record=record)
        with pytest.raises(SecretStoreUnavailableError):
            repository.fetch_and_delete_if(secret_id=record.secret_id, predicate=lambda _r: True)
    finally:
        repository._lock.release()

    assert repository.insert(record=record) == record


def test_repository_rejects_non_positive_lock_timeout() -> None:
    with pytest.raises(ValueError, match="lock_timeout_seconds"):
        InMemorySecretRepository(lock_timeout_seconds=0)
