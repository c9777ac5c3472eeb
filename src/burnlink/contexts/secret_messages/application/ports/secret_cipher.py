from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class SecretIntegrityError(ValueError):
    """
    SecretIntegrityError — AEAD verification failed for sealed secret parts.

    Raised for tampered ciphertext, nonce, tag, associated data, or wrong key.
    Never exposed to transport callers.
    """


@dataclass(frozen=True, slots=True)
class SealedSecret:
    """
    SealedSecret — AEAD output split into persisted parts.

    Related:
      - src/burnlink/contexts/secret_messages/domain/entities/secret_record.py
      - src/burnlink/contexts/secret_messages/adapters/outbound/security/aes_gcm_secret_cipher.py
    """

    ciphertext: bytes
    nonce: bytes
    auth_tag: bytes


class SecretCipher(Protocol):
    """
    SecretCipher — authenticated encryption port for secret message payloads.

    Related:
      - src/burnlink/contexts/secret_messages/application/use_cases/create_secret.py
      - src/burnlink/contexts/secret_messages/application/use_cases/consume_secret.py
      - src/burnlink/contexts/secret_messages/adapters/outbound/security/aes_gcm_secret_cipher.py
    """

    def encrypt(self, *, plaintext: bytes, aad: bytes) -> SealedSecret:
        """
        Encrypt plaintext under fresh random nonce and master key.

        Args:
            plaintext: Message bytes.
            aad: Non-secret associated data bound to ciphertext.
        Returns:
            SealedSecret: Ciphertext, generated nonce, and integrity tag.
        Assumptions:
            Plaintext is never logged.
        Raises:
            ValueError: If inputs are invalid.
        Side Effects:
            Consumes OS CSPRNG randomness for the nonce.
        """
        ...

    def decrypt(self, *, sealed: SealedSecret, aad: bytes) -> bytes:
        """
        Verify integrity tag and decrypt sealed secret parts.

        Args:
            sealed: Persisted ciphertext, nonce, and tag.
            aad: Associated data used at encryption time.
        Returns:
            bytes: Original plaintext.
        Assumptions:
            Partial plaintext is never returned on failure.
        Raises:
            SecretIntegrityError: If verification fails or parts are malformed.
        Side Effects:
            None.
        """
        ...
