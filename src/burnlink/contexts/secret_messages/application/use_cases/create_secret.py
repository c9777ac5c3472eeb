from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta

from burnlink.contexts.secret_messages.application.ports import (
    SecretCipher,
    SecretIdGenerator,
    SecretRepository,
    SecretsClock,
    SecretStoreUnavailableError,
)
from burnlink.contexts.secret_messages.application.use_cases.errors import (
    SecretStorageError,
    SecretValidationError,
)
from burnlink.contexts.secret_messages.application.use_cases.models import CreatedSecretView
from burnlink.contexts.secret_messages.application.use_cases.secret_aad import build_secret_aad
from burnlink.contexts.secret_messages.domain.entities import SecretRecord
from burnlink.contexts.secret_messages.domain.value_objects import DestroyMode

log = logging.getLogger(__name__)

DEFAULT_MAX_MESSAGE_BYTES = 65536
DEFAULT_MAX_TTL_SECONDS = 7 * 24 * 60 * 60
DEFAULT_MAX_INSERT_ATTEMPTS = 3


class CreateSecretUseCase:
    """
    CreateSecretUseCase — validate, encrypt, and persist one secret message.

    Related:
      - src/burnlink/contexts/secret_messages/application/ports/secret_repository.py
      - src/burnlink/contexts/secret_messages/application/ports/secret_cipher.py
      - src/burnlink/contexts/secret_messages/adapters/inbound/api/routes/secret_messages.py
    """

    def __init__(
        self,
        *,
        repository: SecretRepository,
        cipher: SecretCipher,
        id_generator: SecretIdGenerator,
        clock: SecretsClock,
        public_base_url: str,
        max_message_bytes: int = DEFAULT_MAX_MESSAGE_BYTES,
        max_ttl_seconds: int = DEFAULT_MAX_TTL_SECONDS,
        max_insert_attempts: int = DEFAULT_MAX_INSERT_ATTEMPTS,
    ) -> None:
        """
        Initialize use-case dependencies and creation limits.

        Args:
            repository: Secret storage port.
            cipher: AEAD cipher port bound to the master key.
            id_generator: Random identifier source.
            clock: UTC clock port.
            public_base_url: Base URL of links, for example `https://burn.example`.
            max_message_bytes: Upper bound for UTF-8 encoded message size.
            max_ttl_seconds: Upper bound for time-mode TTL.
            max_insert_attempts: Attempts with fresh ids when insert hits duplicate id.
        Returns:
            None.
        Assumptions:
            Dependencies are initialized and non-null.
        Raises:
            ValueError: If any dependency or limit is invalid.
        Side Effects:
            None.
        """
        if repository is None:  # type: ignore[truthy-bool]
            raise ValueError("CreateSecretUseCase requires repository")
        if cipher is None:  # type: ignore[truthy-bool]
            raise ValueError("CreateSecretUseCase requires cipher")
        if id_generator is None:  # type: ignore[truthy-bool]
            raise ValueError("CreateSecretUseCase requires id_generator")
        if clock is None:  # type: ignore[truthy-bool]
            raise ValueError("CreateSecretUseCase requires clock")
        normalized_base_url = public_base_url.strip().rstrip("/")
        if not normalized_base_url:
            raise ValueError("CreateSecretUseCase requires non-empty public_base_url")
        if max_message_bytes <= 0:
            raise ValueError("CreateSecretUseCase max_message_bytes must be > 0")
        if max_ttl_seconds <= 0:
            raise ValueError("CreateSecretUseCase max_ttl_seconds must be > 0")
        if max_insert_attempts <= 0:
            raise ValueError("CreateSecretUseCase max_insert_attempts must be > 0")

        self._repository = repository
        self._cipher = cipher
        self._id_generator = id_generator
        self._clock = clock
        self._public_base_url = normalized_base_url
        self._max_message_bytes = max_message_bytes
        self._max_ttl_seconds = max_ttl_seconds
        self._max_insert_attempts = max_insert_attempts

    def create(
        self,
        *,
        message: str,
        mode: str,
        ttl_seconds: float | None = None,
    ) -> CreatedSecretView:
        """
        Validate request, encrypt message, and persist new secret record.

        Args:
            message: Plaintext message, stored byte-exact.
            mode: Wire mode literal, `view` or `time`.
            ttl_seconds: Lifetime in seconds, required for `time` and ignored for `view`.
        Returns:
            CreatedSecretView: Shareable link plus identifier and deadline.
        Assumptions:
            Validation failures never reach storage.
        Raises:
            SecretValidationError: If message, mode, or ttl is invalid.
            SecretStorageError: If storage fails or every attempt hits a duplicate id.
        Side Effects:
            Encrypts message and writes one record in repository.
        """
        plaintext = _normalize_message(message=message, max_bytes=self._max_message_bytes)
        destroy_mode = _normalize_mode(mode=mode)
        ttl = None
        if destroy_mode is DestroyMode.ON_EXPIRY:
            ttl = _normalize_ttl(ttl_seconds=ttl_seconds, max_ttl_seconds=self._max_ttl_seconds)

        now = _ensure_utc_datetime(value=self._clock.now(), field_name="clock.now")
        expires_at = now + ttl if ttl is not None else None

        for attempt in range(1, self._max_insert_attempts + 1):
            secret_id = self._id_generator.next_id()
            sealed = self._cipher.encrypt(
                plaintext=plaintext,
                aad=build_secret_aad(
                    secret_id=secret_id,
                    destroy_mode=destroy_mode,
                    expires_at=expires_at,
                ),
            )
            record = SecretRecord(
                secret_id=secret_id,
                ciphertext=sealed.ciphertext,
                nonce=sealed.nonce,
                auth_tag=sealed.auth_tag,
                destroy_mode=destroy_mode,
                expires_at=expires_at,
                created_at=now,
            )
            try:
                stored = self._repository.insert(record=record)
            except SecretStoreUnavailableError as error:
                log.error(
                    "event=secret_create_storage_failed secret_id=%s error=%s",
                    secret_id,
                    type(error).__name__,
                )
                raise SecretStorageError() from error
            if stored is not None:
                log.info(
                    "event=secret_created secret_id=%s destroy_mode=%s expires_at=%s",
                    stored.secret_id,
                    stored.destroy_mode.value,
                    stored.expires_at.isoformat() if stored.expires_at is not None else "-",
                )
                return CreatedSecretView(
                    secret_id=stored.secret_id,
                    link=f"{self._public_base_url}/message/{stored.secret_id}",
                    destroy_mode=stored.destroy_mode,
                    expires_at=stored.expires_at,
                )
            log.warning(
                "event=secret_id_collision secret_id=%s attempt=%s",
                secret_id,
                attempt,
            )

        log.error(
            "event=secret_create_id_attempts_exhausted attempts=%s",
            self._max_insert_attempts,
        )
        raise SecretStorageError()



def _normalize_message(*, message: str, max_bytes: int) -> bytes:
    """
    Validate message and return its exact UTF-8 bytes.

    Args:
        message: Raw plaintext message.
        max_bytes: Upper bound for encoded size.
    Returns:
        bytes: UTF-8 encoded message, unmodified.
    Assumptions:
        Whitespace-only messages are rejected but surrounding whitespace is preserved.
    Raises:
        SecretValidationError: If message is not a non-blank string within limit.
    Side Effects:
        None.
    """
    if not isinstance(message, str) or not message.strip():
        raise SecretValidationError(message="message must be a non-empty string.")
    try:
        encoded = message.encode("utf-8")
    except UnicodeEncodeError as error:
        raise SecretValidationError(message="message must be valid UTF-8 text.") from error
    if len(encoded) > max_bytes:
        raise SecretValidationError(
            message=f"message must not exceed {max_bytes} bytes.",
        )
    return encoded



def _normalize_mode(*, mode: str) -> DestroyMode:
    if not isinstance(mode, str):
        raise SecretValidationError(message="mode must be one of: view, time.")
    try:
        return DestroyMode.from_wire_mode(mode)
    except ValueError as error:
        raise SecretValidationError(message="mode must be one of: view, time.") from error



def _normalize_ttl(*, ttl_seconds: float | None, max_ttl_seconds: int) -> timedelta:
    """
    Validate time-mode TTL and convert it into a timedelta.

    Args:
        ttl_seconds: Raw TTL value.
        max_ttl_seconds: Upper bound for TTL.
    Returns:
        timedelta: Positive lifetime.
    Assumptions:
        Booleans are not numbers here even though Python treats them as ints.
    Raises:
        SecretValidationError: If TTL is missing, non-numeric, non-finite, or out of range.
    Side Effects:
        None.
    """
    if (
        ttl_seconds is None
        or isinstance(ttl_seconds, bool)
        or not isinstance(ttl_seconds, (int, float))
        or not math.isfinite(ttl_seconds)
        or ttl_seconds <= 0
    ):
        raise SecretValidationError(
            message="ttl must be a positive number of seconds for time mode.",
        )
    if ttl_seconds > max_ttl_seconds:
        raise SecretValidationError(
            message=f"ttl must not exceed {max_ttl_seconds} seconds.",
        )
    lifetime = timedelta(seconds=ttl_seconds)
    if lifetime <= timedelta(0):
        raise SecretValidationError(
            message="ttl must be a positive number of seconds for time mode.",
        )
    return lifetime



def _ensure_utc_datetime(*, value: datetime, field_name: str) -> datetime:
    offset = value.utcoffset()
    if value.tzinfo is None or offset is None:
        raise ValueError(f"{field_name} must be timezone-aware UTC datetime")
    if offset.total_seconds() != 0:
        raise ValueError(f"{field_name} must be UTC datetime")
    return value
