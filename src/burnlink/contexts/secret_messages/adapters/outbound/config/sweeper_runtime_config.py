from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

_SWEEPER_CONFIG_PATH_KEY = "BURNLINK_SECRETS_SWEEPER_CONFIG"
_ENV_NAME_KEY = "BURNLINK_ENV"
_ALLOWED_ENVS = ("dev", "prod", "test")


@dataclass(frozen=True, slots=True)
class SecretsSweeperRuntimeConfig:
    """
    SecretsSweeperRuntimeConfig — runtime config for expired secrets sweeper worker.

    Related:
      - apps/worker/secrets_sweeper/main/main.py
      - apps/worker/secrets_sweeper/wiring/modules/secrets_sweeper.py
      - configs/dev/secrets_sweeper.yaml
    """

    version: int
    enabled: bool
    interval_seconds: float
    store_timeout_seconds: float
    metrics_port: int

    def __post_init__(self) -> None:
        """
        Validate sweeper config invariants.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Interval bounds how long expired ciphertext may linger on disk.
        Raises:
            ValueError: If one of values is invalid.
        Side Effects:
            None.
        """
        if self.version != 1:
            raise ValueError(f"secrets_sweeper config version must be 1, got {self.version}")
        if self.interval_seconds <= 0:
            raise ValueError("secrets_sweeper.interval_seconds must be > 0")
        if self.store_timeout_seconds <= 0:
            raise ValueError("secrets_sweeper.store_timeout_seconds must be > 0")
        if self.metrics_port <= 0:
            raise ValueError("secrets_sweeper.metrics_port must be > 0")


def resolve_secrets_sweeper_config_path(*, environ: Mapping[str, str]) -> Path:
    """
    Resolve sweeper config path using env override precedence.

    Args:
        environ: Runtime environment mapping.
    Returns:
        Path: Resolved `secrets_sweeper.yaml` path.
    Assumptions:
        Precedence is `BURNLINK_SECRETS_SWEEPER_CONFIG` > `configs/<BURNLINK_ENV>/...`.
    Raises:
        ValueError: If `BURNLINK_ENV` value is unsupported.
    Side Effects:
        None.
    """
    override_path = environ.get(_SWEEPER_CONFIG_PATH_KEY, "").strip()
    if override_path:
        return Path(override_path)

    env_name = environ.get(_ENV_NAME_KEY, "dev").strip().lower()
    if env_name not in _ALLOWED_ENVS:
        raise ValueError(f"{_ENV_NAME_KEY} must be one of {_ALLOWED_ENVS}, got {env_name!r}")
    return Path("configs") / env_name / "secrets_sweeper.yaml"


def load_secrets_sweeper_runtime_config(path: str | Path) -> SecretsSweeperRuntimeConfig:
    """
    Load and validate sweeper runtime YAML config.

    Args:
        path: Path to `secrets_sweeper.yaml`.
    Returns:
        SecretsSweeperRuntimeConfig: Parsed runtime config.
    Assumptions:
        YAML has top-level `version` and `secrets_sweeper` mapping.
    Raises:
        FileNotFoundError: If config path does not exist.
        ValueError: If YAML shape or values are invalid.
    Side Effects:
        Reads one config file from disk.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"secrets sweeper config not found: {config_path}")

    payload = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if not isinstance(payload, Mapping):
        raise ValueError("secrets sweeper config must be mapping at top-level")

    version = _get_int(payload, "version", required=True)
    sweeper_map = _get_mapping(payload, "secrets_sweeper", required=True)
    return SecretsSweeperRuntimeConfig(
        version=version,
        enabled=_get_bool_with_default(sweeper_map, "enabled", default=True),
        interval_seconds=_get_float_with_default(sweeper_map, "interval_seconds", default=60.0),
        store_timeout_seconds=_get_float_with_default(
            sweeper_map,
            "store_timeout_seconds",
            default=30.0,
        ),
        metrics_port=_get_int_with_default(sweeper_map, "metrics_port", default=9310),
    )


def _get_mapping(data: Mapping[str, Any], key: str, *, required: bool) -> Mapping[str, Any]:
    value = data.get(key)
    if value is None:
        if required:
            raise ValueError(f"missing required key: {key}")
        return {}
    if not isinstance(value, Mapping):
        raise ValueError(f"expected mapping at key '{key}', got {type(value).__name__}")
    return value


def _get_int(data: Mapping[str, Any], key: str, *, required: bool) -> int:
    """
    Read integer config value with bool rejection.

    Args:
        data: Source mapping.
        key: Integer key name.
        required: Whether key is required.
    Returns:
        int: Parsed integer value.
    Assumptions:
        Bool values are rejected even though bool subclasses int.
    Raises:
        ValueError: If required key missing or value type is invalid.
    Side Effects:
        None.
    """
    value = data.get(key)
    if value is None:
        if required:
            raise ValueError(f"missing required key: {key}")
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"expected int at key '{key}', got {type(value).__name__}")
    return value


def _get_int_with_default(data: Mapping[str, Any], key: str, *, default: int) -> int:
    if key not in data:
        return default
    return _get_int(data, key, required=True)


def _get_float_with_default(data: Mapping[str, Any], key: str, *, default: float) -> float:
    if key not in data:
        return default
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"expected float at key '{key}', got {type(value).__name__}")
    return float(value)


def _get_bool_with_default(data: Mapping[str, Any], key: str, *, default: bool) -> bool:
    if key not in data:
        return default
    value = data[key]
    if not isinstance(value, bool):
        raise ValueError(f"expected bool at key '{key}', got {type(value).__name__}")
    return value
