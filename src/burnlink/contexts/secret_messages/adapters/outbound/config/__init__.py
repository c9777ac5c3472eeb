from .sweeper_runtime_config import (
    SecretsSweeperRuntimeConfig,
    load_secrets_sweeper_runtime_config,
    resolve_secrets_sweeper_config_path,
)

__all__ = [
    "SecretsSweeperRuntimeConfig",
    "load_secrets_sweeper_runtime_config",
    "resolve_secrets_sweeper_config_path",
]
