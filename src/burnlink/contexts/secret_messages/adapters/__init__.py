"""
Adapters package for secret messages bounded context.
"""

from .inbound import build_secret_messages_router
from .outbound import (
    AesGcmSecretCipher,
    InMemorySecretRepository,
    PostgresSecretRepository,
    PsycopgSecretsPostgresGateway,
    SystemSecretsClock,
    Uuid4SecretIdGenerator,
)

__all__ = [
    "AesGcmSecretCipher",
    "InMemorySecretRepository",
    "PostgresSecretRepository",
    "PsycopgSecretsPostgresGateway",
    "SystemSecretsClock",
    "Uuid4SecretIdGenerator",
    "build_secret_messages_router",
]
