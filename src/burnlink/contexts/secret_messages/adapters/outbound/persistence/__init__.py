from .in_memory import InMemorySecretRepository
from .postgres import (
    PostgresSecretRepository,
    PsycopgSecretsPostgresGateway,
    SecretsPostgresGateway,
)

__all__ = [
    "InMemorySecretRepository",
    "PostgresSecretRepository",
    "PsycopgSecretsPostgresGateway",
    "SecretsPostgresGateway",
]
