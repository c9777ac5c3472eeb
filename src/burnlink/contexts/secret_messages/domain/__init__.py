from .entities import AUTH_TAG_LENGTH, NONCE_LENGTH, SecretRecord
from .value_objects import DestroyMode, SecretId

__all__ = [
    "AUTH_TAG_LENGTH",
    "DestroyMode",
    "NONCE_LENGTH",
    "SecretId",
    "SecretRecord",
]
