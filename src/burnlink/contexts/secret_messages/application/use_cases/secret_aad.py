from __future__ import annotations

from datetime import datetime, timedelta, timezone

from burnlink.contexts.secret_messages.domain.value_objects import DestroyMode, SecretId

_AAD_NAMESPACE = "burnlink.secret_messages.v1"
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MICROSECOND = timedelta(microseconds=1)


def build_secret_aad(
    *,
    secret_id: SecretId,
    destroy_mode: DestroyMode,
    expires_at: datetime | None,
) -> bytes:
    """
    Build deterministic AEAD associated data binding record metadata to ciphertext.

    Args:
        secret_id: Public secret identifier.
        destroy_mode: Destruction policy of the record.
        expires_at: Optional UTC deadline for on-expiry records.
    Returns:
        bytes: UTF-8 `namespace|secret_id|destroy_mode|expires_at_us` string.
    Assumptions:
        `expires_at` is rendered as integer epoch microseconds, which survives
        Postgres `TIMESTAMPTZ` round-trip unchanged; `-` stands for no deadline.
    Raises:
        None.
    Side Effects:
        None.
    """
    expires_part = "-"
    if expires_at is not None:
        expires_part = str((expires_at - _EPOCH) // _ONE_MICROSECOND)
    return f"{_AAD_NAMESPACE}|{secret_id}|{destroy_mode.value}|{expires_part}".encode("utf-8")
