from .clock import SecretsClock
from .secret_cipher import SealedSecret, SecretCipher, SecretIntegrityError
from .secret_id_generator import SecretIdGenerator
from .secret_repository import (
    SecretRecordPredicate,
    SecretRepository,
    SecretStoreUnavailableError,
)

__all__ = [
    "SealedSecret",
    "SecretCipher",
    "SecretIdGenerator",
    "SecretIntegrityError",
    "SecretRecordPredicate",
    "SecretRepository",
    "SecretStoreUnavailableError",
    "SecretsClock",
]
