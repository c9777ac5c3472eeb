from __future__ import annotations

import logging

from burnlink.contexts.secret_messages.application.ports import (
    SecretRepository,
    SecretsClock,
    SecretStoreUnavailableError,
)
from burnlink.contexts.secret_messages.application.use_cases.errors import SecretStorageError
from burnlink.contexts.secret_messages.application.use_cases.models import ExpiredSecretsSweep

log = logging.getLogger(__name__)


class SweepExpiredSecretsUseCase:
    """
    SweepExpiredSecretsUseCase — purge on-expiry records whose deadline passed.

    Storage hygiene only: consumption already refuses expired records on its own.

    Related:
      - apps/worker/secrets_sweeper/wiring/modules/secrets_sweeper.py
      - src/burnlink/contexts/secret_messages/application/ports/secret_repository.py
    """

    def __init__(self, *, repository: SecretRepository, clock: SecretsClock) -> None:
        if repository is None:  # type: ignore[truthy-bool]
            raise ValueError("SweepExpiredSecretsUseCase requires repository")
        if clock is None:  # type: ignore[truthy-bool]
            raise ValueError("SweepExpiredSecretsUseCase requires clock")
        self._repository = repository
        self._clock = clock

    def sweep(self) -> int:
        """
        Delete every on-expiry record with `expires_at <= now`.

        Args:
            None.
        Returns:
            int: Number of purged records.
        Assumptions:
            Concurrent consumption may remove some of the same rows first.
        Raises:
            SecretStorageError: If storage fails or times out.
        Side Effects:
            Deletes zero or more records.
        """
        return self.sweep_with_cutoff().purged

    def sweep_with_cutoff(self) -> ExpiredSecretsSweep:
        """
        Delete expired on-expiry records and report the cutoff the delete used.

        Args:
            None.
        Returns:
            ExpiredSecretsSweep: Purged count and the clock reading used as cutoff.
        Assumptions:
            Clock is read exactly once per sweep.
        Raises:
            SecretStorageError: If storage fails or times out.
        Side Effects:
            Deletes zero or more records.
        """
        cutoff = self._clock.now()
        try:
            purged = self._repository.delete_expired_before(timestamp=cutoff)
        except SecretStoreUnavailableError as error:
            raise SecretStorageError() from error
        if purged:
            log.info("event=expired_secrets_purged count=%s cutoff=%s", purged, cutoff.isoformat())
        return ExpiredSecretsSweep(purged=purged, cutoff=cutoff)
