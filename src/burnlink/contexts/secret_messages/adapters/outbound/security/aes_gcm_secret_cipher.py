from __future__ import annotations

import base64
import binascii
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from burnlink.contexts.secret_messages.application.ports.secret_cipher import (
    SealedSecret,
    SecretCipher,
    SecretIntegrityError,
)
from burnlink.contexts.secret_messages.domain.entities import AUTH_TAG_LENGTH, NONCE_LENGTH

_MASTER_KEY_LENGTH = 32
_MASTER_KEY_BITS = _MASTER_KEY_LENGTH * 8


class AesGcmSecretCipher(SecretCipher):
    """
    AesGcmSecretCipher — AES-256-GCM cipher for secret message payloads.

    Related:
      - src/burnlink/contexts/secret_messages/application/ports/secret_cipher.py
      - src/burnlink/contexts/secret_messages/application/use_cases/create_secret.py
      - apps/api/wiring/modules/secret_messages.py
      - apps/cli/commands/generate_master_key.py
    """

    def __init__(self, *, master_key: bytes) -> None:
        """
        Initialize cipher with raw 256-bit master key.

        Args:
            master_key: 32 raw key bytes.
        Returns:
            None.
        Assumptions:
            Key is supplied by wiring and never read from ambient process state here.
        Raises:
            ValueError: If key is not exactly 32 bytes.
        Side Effects:
            None.
        """
        key_bytes = bytes(master_key)
        if len(key_bytes) != _MASTER_KEY_LENGTH:
            raise ValueError(
                f"AesGcmSecretCipher requires {_MASTER_KEY_LENGTH}-byte master key, "
                f"got {len(key_bytes)} bytes"
            )
        self._aead = AESGCM(key_bytes)

    @classmethod
    def from_b64(cls, master_key_b64: str) -> AesGcmSecretCipher:
        """
        Build cipher from base64 master key (`SECRETS_MASTER_KEY_B64`).

        Args:
            master_key_b64: Base64-encoded 32-byte key.
        Returns:
            AesGcmSecretCipher: Configured cipher.
        Assumptions:
            Standard base64 alphabet with padding.
        Raises:
            ValueError: If value is blank, not base64, or wrong length.
        Side Effects:
            None.
        """
        normalized = master_key_b64.strip()
        if not normalized:
            raise ValueError("AesGcmSecretCipher requires non-empty master_key_b64")
        try:
            key_bytes = base64.b64decode(normalized, validate=True)
        except binascii.Error as error:
            raise ValueError("SECRETS_MASTER_KEY_B64 must be valid base64") from error
        if len(key_bytes) != _MASTER_KEY_LENGTH:
            raise ValueError("SECRETS_MASTER_KEY_B64 must decode to 32 bytes for AES-256-GCM")
        return cls(master_key=key_bytes)

    @staticmethod
    def generate_master_key() -> bytes:
        return AESGCM.generate_key(bit_length=_MASTER_KEY_BITS)

    def encrypt(self, *, plaintext: bytes, aad: bytes) -> SealedSecret:
        """
        Encrypt plaintext with fresh 96-bit nonce and split the GCM tag off.

        Args:
            plaintext: Message bytes.
            aad: Non-secret associated data.
        Returns:
            SealedSecret: Ciphertext without tag, nonce, and 16-byte tag.
        Assumptions:
            Nonce collisions are negligible with per-record random 96-bit nonces.
        Raises:
            ValueError: If aad is empty.
        Side Effects:
            Uses OS CSPRNG for the nonce.
        """
        if not aad:
            raise ValueError("AesGcmSecretCipher aad must be non-empty")
        nonce = os.urandom(NONCE_LENGTH)
        sealed = self._aead.encrypt(nonce, bytes(plaintext), bytes(aad))
        return SealedSecret(
            ciphertext=sealed[:-AUTH_TAG_LENGTH],
            nonce=nonce,
            auth_tag=sealed[-AUTH_TAG_LENGTH:],
        )

    def decrypt(self, *, sealed: SealedSecret, aad: bytes) -> bytes:
        """
        Verify tag and decrypt sealed parts.

        Args:
            sealed: Ciphertext, nonce, and tag from storage.
            aad: Associated data rebuilt from record metadata.
        Returns:
            bytes: Plaintext.
        Assumptions:
            Tag comparison is constant-time inside the AEAD primitive.
        Raises:
            SecretIntegrityError: If parts are malformed or authentication fails.
        Side Effects:
            None.
        """
        nonce = bytes(sealed.nonce)
        auth_tag = bytes(sealed.auth_tag)
        if len(nonce) != NONCE_LENGTH:
            raise SecretIntegrityError("Sealed secret nonce has invalid length")
        if len(auth_tag) != AUTH_TAG_LENGTH:
            raise SecretIntegrityError("Sealed secret auth tag has invalid length")
        try:
            return self._aead.decrypt(nonce, bytes(sealed.ciphertext) + auth_tag, bytes(aad))
        except InvalidTag as error:
            raise SecretIntegrityError("Sealed secret authentication failed") from error
