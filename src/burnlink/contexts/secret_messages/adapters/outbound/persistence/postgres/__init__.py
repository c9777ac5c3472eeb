from .gateway import PsycopgSecretsPostgresGateway, SecretsPostgresGateway
from .secret_repository import PostgresSecretRepository

__all__ = [
    "PostgresSecretRepository",
    "PsycopgSecretsPostgresGateway",
    "SecretsPostgresGateway",
]
