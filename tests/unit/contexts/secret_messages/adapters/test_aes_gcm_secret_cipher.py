from __future__ import annotations

import base64

import pytest

from burnlink.contexts.secret_messages.adapters.outbound import AesGcmSecretCipher
from burnlink.contexts.secret_messages.application.ports import SealedSecret, SecretIntegrityError

_KEY = bytes(range(32))
_AAD = b"burnlink.secret_messages.v1|id|on_read|-"


def _flip_first_byte(value: bytes) -> bytes:
    return bytes([value[0] ^ 0x01]) + value[1:]


def test_encrypt_decrypt_returns_original_plaintext() -> None:
    """
    Verify sealed parts decrypt back to the exact plaintext bytes.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Ciphertext excludes the 16-byte tag and keeps plaintext length.
    Raises:
        AssertionError: If round trip or part sizes differ.
    Side Effects:
        None.
    """
    cipher = AesGcmSecretCipher(master_key=_KEY)
    plaintext = "  пароль: hunter2 \n".encode("utf-8")

    sealed = cipher.encrypt(plaintext=plaintext, aad=_AAD)

    assert len(sealed.nonce) == 12
    assert len(sealed.auth_tag) == 16
    assert len(sealed.ciphertext) == len(plaintext)
    assert sealed.ciphertext != plaintext
    assert cipher.decrypt(sealed=sealed, aad=_AAD) == plaintext


def test_encrypt_uses_fresh_nonce_for_each_call() -> None:
    cipher = AesGcmSecretCipher(master_key=_KEY)

    first = cipher.encrypt(plaintext=b"same", aad=_AAD)
    second = cipher.encrypt(plaintext=b"same", aad=_AAD)

    assert first.nonce != second.nonce
    assert first.ciphertext != second.ciphertext


@pytest.mark.parametrize("part", ["ciphertext", "nonce", "auth_tag"])
def test_decrypt_rejects_tampered_part(part: str) -> None:
    """
    Verify any single flipped bit in persisted parts fails authentication.

    Args:
        part: Name of sealed part to tamper.
    Returns:
        None.
    Assumptions:
        Partial plaintext is never returned on failure.
    Raises:
        AssertionError: If tampered input decrypts.
    Side Effects:
        None.
    """
    cipher = AesGcmSecretCipher(master_key=_KEY)
    sealed = cipher.encrypt(plaintext=b"top secret", aad=_AAD)
    parts = {
        "ciphertext": sealed.ciphertext,
        "nonce": sealed.nonce,
        "auth_tag": sealed.auth_tag,
    }
    parts[part] = _flip_first_byte(parts[part])

    with pytest.raises(SecretIntegrityError):
        cipher.decrypt(sealed=SealedSecret(**parts), aad=_AAD)


def test_decrypt_rejects_wrong_key_and_wrong_aad() -> None:
    cipher = AesGcmSecretCipher(master_key=_KEY)
    other_cipher = AesGcmSecretCipher(master_key=bytes(reversed(_KEY)))
    sealed = cipher.encrypt(plaintext=b"top secret", aad=_AAD)

    with pytest.raises(SecretIntegrityError):
        other_cipher.decrypt(sealed=sealed, aad=_AAD)
    with pytest.raises(SecretIntegrityError):
        cipher.decrypt(sealed=sealed, aad=_AAD + b"x")


def test_decrypt_rejects_malformed_nonce_and_tag_lengths() -> None:
    cipher = AesGcmSecretCipher(master_key=_KEY)
    sealed = cipher.encrypt(plaintext=b"top secret", aad=_AAD)

    with pytest.raises(SecretIntegrityError, match="nonce"):
        cipher.decrypt(
            sealed=SealedSecret(
                ciphertext=sealed.ciphertext,
                nonce=sealed.nonce[:8],
                auth_tag=sealed.auth_tag,
            ),
            aad=_AAD,
        )
    with pytest.raises(SecretIntegrityError, match="auth tag"):
        cipher.decrypt(
            sealed=SealedSecret(
                ciphertext=sealed.ciphertext,
                nonce=sealed.nonce,
                auth_tag=b"",
            ),
            aad=_AAD,
        )


def test_encrypt_rejects_empty_aad() -> None:
    cipher = AesGcmSecretCipher(master_key=_KEY)

    with pytest.raises(ValueError, match="aad"):
        cipher.encrypt(plaintext=b"x", aad=b"")


def test_cipher_requires_32_byte_master_key() -> None:
    with pytest.raises(ValueError, match="32-byte"):
        AesGcmSecretCipher(master_key=b"short")


def test_from_b64_validates_encoding_and_length() -> None:
    valid = base64.b64encode(_KEY).decode("ascii")

    cipher = AesGcmSecretCipher.from_b64(f" {valid}\n")
    sealed = cipher.encrypt(plaintext=b"x", aad=_AAD)

    assert AesGcmSecretCipher(master_key=_KEY).decrypt(sealed=sealed, aad=_AAD) == b"x"
    with pytest.raises(ValueError, match="non-empty"):
        AesGcmSecretCipher.from_b64("   ")
    with pytest.raises(ValueError, match="valid base64"):
        AesGcmSecretCipher.from_b64("not base64!!")
    with pytest.raises(ValueError, match="32 bytes"):
        AesGcmSecretCipher.from_b64(base64.b64encode(b"sixteen-byte-key").decode("ascii"))


def test_generate_master_key_returns_distinct_32_byte_keys() -> None:
    first = AesGcmSecretCipher.generate_master_key()
    second = AesGcmSecretCipher.generate_master_key()

    assert len(first) == 32
    assert first != second
