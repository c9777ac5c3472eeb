from .ports import (
    SealedSecret,
    SecretCipher,
    SecretIdGenerator,
    SecretIntegrityError,
    SecretRepository,
    SecretsClock,
    SecretStoreUnavailableError,
)
from .use_cases import (
    ConsumeSecretUseCase,
    CreateSecretUseCase,
    SecretNotFoundError,
    SecretsOperationError,
    SecretStorageError,
    SecretValidationError,
    SweepExpiredSecretsUseCase,
)

__all__ = [
    "ConsumeSecretUseCase",
    "CreateSecretUseCase",
    "SealedSecret",
    "SecretCipher",
    "SecretIdGenerator",
    "SecretIntegrityError",
    "SecretNotFoundError",
    "SecretRepository",
    "SecretStorageError",
    "SecretStoreUnavailableError",
    "SecretValidationError",
    "SecretsClock",
    "SecretsOperationError",
    "SweepExpiredSecretsUseCase",
]
