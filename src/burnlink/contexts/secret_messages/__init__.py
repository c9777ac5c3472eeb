from .application import (
    ConsumeSecretUseCase,
    CreateSecretUseCase,
    SecretCipher,
    SecretNotFoundError,
    SecretRepository,
    SecretsOperationError,
    SecretStorageError,
    SecretValidationError,
    SweepExpiredSecretsUseCase,
)
from .domain import DestroyMode, SecretId, SecretRecord

__all__ = [
    "ConsumeSecretUseCase",
    "CreateSecretUseCase",
    "DestroyMode",
    "SecretCipher",
    "SecretId",
    "SecretNotFoundError",
    "SecretRecord",
    "SecretRepository",
    "SecretStorageError",
    "SecretValidationError",
    "SecretsOperationError",
    "SweepExpiredSecretsUseCase",
]
