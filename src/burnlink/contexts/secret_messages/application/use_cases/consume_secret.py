from __future__ import annotations

import logging

from burnlink.contexts.secret_messages.application.ports import (
    SealedSecret,
    SecretCipher,
    SecretIntegrityError,
    SecretRepository,
    SecretsClock,
    SecretStoreUnavailableError,
)
from burnlink.contexts.secret_messages.application.use_cases.errors import (
    SecretCorruptionError,
    SecretNotFoundError,
    SecretStorageError,
)
from burnlink.contexts.secret_messages.application.use_cases.models import ConsumedSecretView
from burnlink.contexts.secret_messages.application.use_cases.secret_aad import build_secret_aad
from burnlink.contexts.secret_messages.domain.entities import SecretRecord
from burnlink.contexts.secret_messages.domain.value_objects import SecretId

log = logging.getLogger(__name__)


class ConsumeSecretUseCase:
    """
    ConsumeSecretUseCase — disclose one secret at most once and destroy it in the same step.

    Related:
      - src/burnlink/contexts/secret_messages/application/ports/secret_repository.py
      - src/burnlink/contexts/secret_messages/domain/entities/secret_record.py
      - src/burnlink/contexts/secret_messages/adapters/inbound/api/routes/secret_messages.py
    """

    def __init__(
        self,
        *,
        repository: SecretRepository,
        cipher: SecretCipher,
        clock: SecretsClock,
    ) -> None:
        """
        Initialize use-case dependencies for storage, decryption, and deadline checks.

        Args:
            repository: Secret storage port with atomic fetch-and-delete.
            cipher: AEAD cipher port bound to the master key.
            clock: UTC clock port.
        Returns:
            None.
        Assumptions:
            Dependencies are initialized and non-null.
        Raises:
            ValueError: If any dependency is missing.
        Side Effects:
            None.
        """
        if repository is None:  # type: ignore[truthy-bool]
            raise ValueError("ConsumeSecretUseCase requires repository")
        if cipher is None:  # type: ignore[truthy-bool]
            raise ValueError("ConsumeSecretUseCase requires cipher")
        if clock is None:  # type: ignore[truthy-bool]
            raise ValueError("ConsumeSecretUseCase requires clock")

        self._repository = repository
        self._cipher = cipher
        self._clock = clock

    def consume(self, *, secret_id: str) -> ConsumedSecretView:
        """
        Atomically take the record out of storage, then decrypt and return it.

        Args:
            secret_id: Raw identifier from the link.
        Returns:
            ConsumedSecretView: Plaintext plus destroy mode and deadline.
        Assumptions:
            Record is already gone from storage when decryption runs, so a failed
            decryption is never retried.
        Raises:
            SecretNotFoundError: If id is malformed, absent, consumed, expired, or corrupted.
            SecretStorageError: If storage fails or times out.
        Side Effects:
            Deletes at most one record.
        """
        parsed_id = _parse_secret_id(raw_value=secret_id)
        if parsed_id is None:
            raise SecretNotFoundError()

        # Clock is read inside the predicate, after the store has taken the record.
        try:
            record = self._repository.fetch_and_delete_if(
                secret_id=parsed_id,
                predicate=lambda candidate: candidate.is_disclosable_at(self._clock.now()),
            )
        except SecretStoreUnavailableError as error:
            log.error(
                "event=secret_consume_storage_failed secret_id=%s error=%s",
                parsed_id,
                type(error).__name__,
            )
            raise SecretStorageError() from error

        if record is None:
            raise SecretNotFoundError()

        try:
            message = self._decrypt_message(record=record)
        except SecretCorruptionError as corruption:
            log.error(
                "event=secret_corrupted secret_id=%s reason=%s",
                corruption.secret_id,
                corruption.reason,
            )
            raise SecretNotFoundError() from corruption

        log.info(
            "event=secret_consumed secret_id=%s destroy_mode=%s",
            record.secret_id,
            record.destroy_mode.value,
        )
        return ConsumedSecretView(
            secret_id=record.secret_id,
            message=message,
            destroy_mode=record.destroy_mode,
            expires_at=record.expires_at,
        )

    def _decrypt_message(self, *, record: SecretRecord) -> str:
        """
        Decrypt record payload and decode UTF-8 text.

        Args:
            record: Record removed from storage.
        Returns:
            str: Plaintext message.
        Assumptions:
            AAD is rebuilt from persisted metadata exactly as at creation time.
        Raises:
            SecretCorruptionError: If integrity check or UTF-8 decoding fails.
        Side Effects:
            None.
        """
        aad = build_secret_aad(
            secret_id=record.secret_id,
            destroy_mode=record.destroy_mode,
            expires_at=record.expires_at,
        )
        sealed = SealedSecret(
            ciphertext=record.ciphertext,
            nonce=record.nonce,
            auth_tag=record.auth_tag,
        )
        try:
            plaintext = self._cipher.decrypt(sealed=sealed, aad=aad)
        except SecretIntegrityError as error:
            raise SecretCorruptionError(
                secret_id=str(record.secret_id),
                reason="integrity_check_failed",
            ) from error
        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as error:
            raise SecretCorruptionError(
                secret_id=str(record.secret_id),
                reason="invalid_utf8",
            ) from error



def _parse_secret_id(*, raw_value: str) -> SecretId | None:
    if not isinstance(raw_value, str):
        return None
    try:
        return SecretId.from_string(raw_value)
    except ValueError:
        return None
