from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from burnlink.contexts.secret_messages.domain.value_objects import DestroyMode, SecretId

NONCE_LENGTH = 12
AUTH_TAG_LENGTH = 16


@dataclass(frozen=True, slots=True)
class SecretRecord:
    """
    SecretRecord — immutable encrypted-at-rest snapshot of one secret message.

    Related:
      - src/burnlink/contexts/secret_messages/application/ports/secret_repository.py
      - src/burnlink/contexts/secret_messages/application/use_cases/consume_secret.py
      - alembic/versions/20261019_0001_secret_messages_v1.py
    """

    secret_id: SecretId
    ciphertext: bytes
    nonce: bytes
    auth_tag: bytes
    destroy_mode: DestroyMode
    expires_at: datetime | None
    created_at: datetime

    def __post_init__(self) -> None:
        """
        Validate record invariants for crypto material, mode/expiry pairing, and timestamps.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            `created_at` and `expires_at` (when set) are timezone-aware UTC.
        Raises:
            ValueError: If one of record invariants is violated.
        Side Effects:
            None.
        """
        if not isinstance(self.secret_id, SecretId):
            raise ValueError("SecretRecord.secret_id must be SecretId")
        if not isinstance(self.destroy_mode, DestroyMode):
            raise ValueError("SecretRecord.destroy_mode must be DestroyMode")
        if len(self.nonce) != NONCE_LENGTH:
            raise ValueError(f"SecretRecord.nonce must be exactly {NONCE_LENGTH} bytes")
        if len(self.auth_tag) != AUTH_TAG_LENGTH:
            raise ValueError(f"SecretRecord.auth_tag must be exactly {AUTH_TAG_LENGTH} bytes")

        _ensure_utc_datetime(name="created_at", value=self.created_at)
        if self.destroy_mode is DestroyMode.ON_EXPIRY:
            if self.expires_at is None:
                raise ValueError("SecretRecord.expires_at is required for on_expiry mode")
            _ensure_utc_datetime(name="expires_at", value=self.expires_at)
            if self.expires_at <= self.created_at:
                raise ValueError("SecretRecord.expires_at must be later than created_at")
        elif self.expires_at is not None:
            raise ValueError("SecretRecord.expires_at must be None for on_read mode")

    def is_expired_at(self, now: datetime) -> bool:
        """
        Check whether deadline of on-expiry record has passed at `now`.

        Args:
            now: Timezone-aware UTC timestamp.
        Returns:
            bool: `True` when `now >= expires_at`; always `False` for on-read records.
        Assumptions:
            Deadline boundary is inclusive: a record is gone at exactly `expires_at`.
        Raises:
            None.
        Side Effects:
            None.
        """
        if self.expires_at is None:
            return False
        return now >= self.expires_at

    def is_disclosable_at(self, now: datetime) -> bool:
        return not self.is_expired_at(now)


def _ensure_utc_datetime(*, name: str, value: datetime) -> None:
    offset = value.utcoffset()
    if value.tzinfo is None or offset is None:
        raise ValueError(f"SecretRecord.{name} must be timezone-aware UTC datetime")
    if offset.total_seconds() != 0:
        raise ValueError(f"SecretRecord.{name} must be UTC datetime")
