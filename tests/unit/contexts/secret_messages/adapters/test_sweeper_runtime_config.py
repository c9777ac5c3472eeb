from __future__ import annotations

from pathlib import Path

import pytest

from burnlink.contexts.secret_messages.adapters.outbound import (
    load_secrets_sweeper_runtime_config,
    resolve_secrets_sweeper_config_path,
)


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "secrets_sweeper.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_config_reads_values(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "version: 1\n"
        "secrets_sweeper:\n"
        "  enabled: false\n"
        "  interval_seconds: 15\n"
        "  store_timeout_seconds: 2.5\n"
        "  metrics_port: 9400\n",
    )

    config = load_secrets_sweeper_runtime_config(path)

    assert config.version == 1
    assert config.enabled is False
    assert config.interval_seconds == 15.0
    assert config.store_timeout_seconds == 2.5
    assert config.metrics_port == 9400


def test_load_config_applies_defaults(tmp_path: Path) -> None:
    config = load_secrets_sweeper_runtime_config(_write(tmp_path, "version: 1\nsecrets_sweeper: {}\n"))

    assert config.enabled is True
    assert config.interval_seconds == 60.0
    assert config.store_timeout_seconds == 30.0
    assert config.metrics_port == 9310


@pytest.mark.parametrize(
    ("text", "match"),
    [
        ("- 1\n", "mapping at top-level"),
        ("secrets_sweeper: {}\n", "missing required key: version"),
        ("version: 2\nsecrets_sweeper: {}\n", "version must be 1"),
        ("version: 1\n", "missing required key: secrets_sweeper"),
        ("version: 1\nsecrets_sweeper:\n  interval_seconds: 0\n", "interval_seconds must be > 0"),
        ("version: 1\nsecrets_sweeper:\n  interval_seconds: fast\n", "expected float"),
        ("version: 1\nsecrets_sweeper:\n  enabled: 'yes'\n", "expected bool"),
        ("version: 1\nsecrets_sweeper:\n  metrics_port: true\n", "expected int"),
    ],
)
def test_load_config_rejects_invalid_shapes(tmp_path: Path, text: str, match: str) -> None:
    with pytest.raises(ValueError, match=match):
        load_secrets_sweeper_runtime_config(_write(tmp_path, text))


def test_load_config_raises_for_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_secrets_sweeper_runtime_config(tmp_path / "absent.yaml")


def test_resolve_config_path_precedence() -> None:
    assert resolve_secrets_sweeper_config_path(environ={}) == Path(
        "configs/dev/secrets_sweeper.yaml"
    )
    assert resolve_secrets_sweeper_config_path(environ={"BURNLINK_ENV": "prod"}) == Path(
        "configs/prod/secrets_sweeper.yaml"
    )
    assert resolve_secrets_sweeper_config_path(
        environ={"BURNLINK_ENV": "prod", "BURNLINK_SECRETS_SWEEPER_CONFIG": "/etc/sweeper.yaml"}
    ) == Path("/etc/sweeper.yaml")
    with pytest.raises(ValueError, match="BURNLINK_ENV"):
        resolve_secrets_sweeper_config_path(environ={"BURNLINK_ENV": "staging"})


def test_repository_configs_are_loadable() -> None:
    repo_root = Path(__file__).resolve().parents[5]
    for env_name in ("dev", "test", "prod"):
        config = load_secrets_sweeper_runtime_config(
            repo_root / "configs" / env_name / "secrets_sweeper.yaml"
        )
        assert config.enabled is True
