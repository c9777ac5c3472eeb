from .secret_record import AUTH_TAG_LENGTH, NONCE_LENGTH, SecretRecord

__all__ = [
    "AUTH_TAG_LENGTH",
    "NONCE_LENGTH",
    "SecretRecord",
]
