from .config import (
    SecretsSweeperRuntimeConfig,
    load_secrets_sweeper_runtime_config,
    resolve_secrets_sweeper_config_path,
)
from .ids import Uuid4SecretIdGenerator
from .persistence import (
    InMemorySecretRepository,
    PostgresSecretRepository,
    PsycopgSecretsPostgresGateway,
    SecretsPostgresGateway,
)
from .security import AesGcmSecretCipher
from .time import SystemSecretsClock

__all__ = [
    "AesGcmSecretCipher",
    "InMemorySecretRepository",
    "PostgresSecretRepository",
    "PsycopgSecretsPostgresGateway",
    "SecretsPostgresGateway",
    "SecretsSweeperRuntimeConfig",
    "SystemSecretsClock",
    "Uuid4SecretIdGenerator",
    "load_secrets_sweeper_runtime_config",
    "resolve_secrets_sweeper_config_path",
]
