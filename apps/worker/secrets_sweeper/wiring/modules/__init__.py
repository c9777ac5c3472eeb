from .secrets_sweeper import (
    SecretsSweeperApp,
    SecretsSweeperMetrics,
    build_secrets_sweeper_app,
)

__all__ = [
    "SecretsSweeperApp",
    "SecretsSweeperMetrics",
    "build_secrets_sweeper_app",
]
