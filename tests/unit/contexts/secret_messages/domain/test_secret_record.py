from __future__ import annotations

from datetime import datetime, timedelta, timezone
from uuid import UUID

import pytest

from burnlink.contexts.secret_messages.domain import (
    AUTH_TAG_LENGTH,
    NONCE_LENGTH,
    DestroyMode,
    SecretId,
    SecretRecord,
)

_CREATED_AT = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)
_SECRET_ID = SecretId(UUID("6b0f8a4e-3c1d-4b9e-9a57-2f3e4d5c6b7a"))


def _record(
    *,
    destroy_mode: DestroyMode = DestroyMode.ON_READ,
    expires_at: datetime | None = None,
    nonce: bytes = b"\x01" * NONCE_LENGTH,
    auth_tag: bytes = b"\x02" * AUTH_TAG_LENGTH,
    created_at: datetime = _CREATED_AT,
) -> SecretRecord:
    return SecretRecord(
        secret_id=_SECRET_ID,
        ciphertext=b"ciphertext",
        nonce=nonce,
        auth_tag=auth_tag,
        destroy_mode=destroy_mode,
        expires_at=expires_at,
        created_at=created_at,
    )


def test_on_read_record_never_expires() -> None:
    """
    Verify on-read record is disclosable at any time after creation.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        On-read records carry no deadline.
    Raises:
        AssertionError: If expiry check reports on-read record as expired.
    Side Effects:
        None.
    """
    record = _record()

    assert record.is_expired_at(_CREATED_AT + timedelta(days=3650)) is False
    assert record.is_disclosable_at(_CREATED_AT + timedelta(days=3650)) is True


def test_on_expiry_record_deadline_is_inclusive() -> None:
    """
    Verify on-expiry record is gone at exactly `expires_at`, not one tick later.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Deadline boundary is `now >= expires_at`.
    Raises:
        AssertionError: If boundary comparison is off by one.
    Side Effects:
        None.
    """
    expires_at = _CREATED_AT + timedelta(seconds=60)
    record = _record(destroy_mode=DestroyMode.ON_EXPIRY, expires_at=expires_at)

    assert record.is_disclosable_at(expires_at - timedelta(microseconds=1)) is True
    assert record.is_expired_at(expires_at) is True
    assert record.is_disclosable_at(expires_at) is False


@pytest.mark.parametrize(
    ("kwargs", "match"),
    [
        ({"nonce": b"\x01" * 11}, "nonce"),
        ({"auth_tag": b"\x02" * 15}, "auth_tag"),
        ({"destroy_mode": DestroyMode.ON_EXPIRY}, "expires_at is required"),
        ({"expires_at": _CREATED_AT + timedelta(seconds=5)}, "must be None"),
        (
            {"destroy_mode": DestroyMode.ON_EXPIRY, "expires_at": _CREATED_AT},
            "later than created_at",
        ),
        ({"created_at": datetime(2026, 10, 19, 12, 0, 0)}, "timezone-aware"),
        (
            {"created_at": datetime(2026, 10, 19, 12, 0, tzinfo=timezone(timedelta(hours=3)))},
            "UTC",
        ),
    ],
)
def test_secret_record_rejects_invalid_invariants(kwargs: dict, match: str) -> None:
    with pytest.raises(ValueError, match=match):
        _record(**kwargs)


def test_secret_id_parses_canonical_string_and_round_trips() -> None:
    raw = "6b0f8a4e-3c1d-4b9e-9a57-2f3e4d5c6b7a"

    parsed = SecretId.from_string(f"  {raw}  ")

    assert parsed == _SECRET_ID
    assert str(parsed) == raw


@pytest.mark.parametrize("raw", ["", "   ", "not-a-uuid", "12345"])
def test_secret_id_rejects_malformed_values(raw: str) -> None:
    with pytest.raises(ValueError):
        SecretId.from_string(raw)


def test_destroy_mode_maps_wire_literals_both_ways() -> None:
    assert DestroyMode.from_wire_mode("view") is DestroyMode.ON_READ
    assert DestroyMode.from_wire_mode("time") is DestroyMode.ON_EXPIRY
    assert DestroyMode.ON_READ.to_wire_mode() == "view"
    assert DestroyMode.ON_EXPIRY.to_wire_mode() == "time"

    with pytest.raises(ValueError, match="Unsupported destroy mode"):
        DestroyMode.from_wire_mode("forever")


@pytest.mark.parametrize("raw", [" view", "VIEW", "Time", "time\n"])
def test_destroy_mode_rejects_non_exact_wire_literals(raw: str) -> None:
    with pytest.raises(ValueError, match="Unsupported destroy mode"):
        DestroyMode.from_wire_mode(raw)
