from .consume_secret import ConsumeSecretUseCase
from .create_secret import (
    DEFAULT_MAX_INSERT_ATTEMPTS,
    DEFAULT_MAX_MESSAGE_BYTES,
    DEFAULT_MAX_TTL_SECONDS,
    CreateSecretUseCase,
)
from .errors import (
    SecretCorruptionError,
    SecretNotFoundError,
    SecretsOperationError,
    SecretStorageError,
    SecretValidationError,
)
from .models import ConsumedSecretView, CreatedSecretView, ExpiredSecretsSweep
from .secret_aad import build_secret_aad
from .sweep_expired_secrets import SweepExpiredSecretsUseCase

__all__ = [
    "ConsumeSecretUseCase",
    "ConsumedSecretView",
    "CreateSecretUseCase",
    "CreatedSecretView",
    "DEFAULT_MAX_INSERT_ATTEMPTS",
    "DEFAULT_MAX_MESSAGE_BYTES",
    "DEFAULT_MAX_TTL_SECONDS",
    "ExpiredSecretsSweep",
    "SecretCorruptionError",
    "SecretNotFoundError",
    "SecretStorageError",
    "SecretValidationError",
    "SecretsOperationError",
    "SweepExpiredSecretsUseCase",
    "build_secret_aad",
]
