from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import pytest

from burnlink.contexts.secret_messages.adapters.outbound import (
    AesGcmSecretCipher,
    InMemorySecretRepository,
    Uuid4SecretIdGenerator,
)
from burnlink.contexts.secret_messages.application.ports import SecretStoreUnavailableError
from burnlink.contexts.secret_messages.application.use_cases import (
    CreateSecretUseCase,
    SecretStorageError,
    SweepExpiredSecretsUseCase,
)

_START = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


class _MutableClock:
    def __init__(self, now: datetime) -> None:
        self._now = now

    def now(self) -> datetime:
        return self._now

    def advance(self, *, seconds: float) -> None:
        self._now = self._now + timedelta(seconds=seconds)


class _UnavailableRepository:
    def delete_expired_before(self, *, timestamp: datetime) -> int:
        raise SecretStoreUnavailableError("connection refused")


def test_sweep_purges_only_expired_time_mode_secrets(caplog: pytest.LogCaptureFixture) -> None:
    """
    Verify sweep removes past-deadline records and keeps live and view-mode records.

    Args:
        caplog: pytest log capture fixture.
    Returns:
        None.
    Assumptions:
        Sweep uses the same inclusive deadline as consumption.
    Raises:
        AssertionError: If wrong records are purged.
    Side Effects:
        None.
    """
    repository = InMemorySecretRepository()
    clock = _MutableClock(_START)
    create = CreateSecretUseCase(
        repository=repository,
        cipher=AesGcmSecretCipher(master_key=bytes(32)),
        id_generator=Uuid4SecretIdGenerator(),
        clock=clock,
        public_base_url="http://localhost:3000",
    )
    create.create(message="short", mode="time", ttl_seconds=5)
    create.create(message="exact", mode="time", ttl_seconds=10)
    create.create(message="long", mode="time", ttl_seconds=3600)
    create.create(message="view", mode="view")
    sweep = SweepExpiredSecretsUseCase(repository=repository, clock=clock)

    assert sweep.sweep() == 0

    clock.advance(seconds=10)
    with caplog.at_level(logging.INFO):
        purged = sweep.sweep()

    assert purged == 2
    assert repository.count() == 2
    assert "event=expired_secrets_purged count=2" in caplog.text


def test_sweep_maps_store_unavailable_to_storage_error() -> None:
    sweep = SweepExpiredSecretsUseCase(
        repository=_UnavailableRepository(),
        clock=_MutableClock(_START),
    )

    with pytest.raises(SecretStorageError):
        sweep.sweep()


def test_sweep_with_cutoff_reports_clock_reading_passed_to_repository() -> None:
    cutoffs: list[datetime] = []

    class _RecordingRepository:
        def delete_expired_before(self, *, timestamp: datetime) -> int:
            cutoffs.append(timestamp)
            return 4

    sweep = SweepExpiredSecretsUseCase(repository=_RecordingRepository(), clock=_MutableClock(_START))

    outcome = sweep.sweep_with_cutoff()

    assert outcome.purged == 4
    assert outcome.cutoff == _START
    assert cutoffs == [_START]
