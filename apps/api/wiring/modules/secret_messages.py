"""
Composition helpers for secret messages API module.
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from typing import Mapping

from fastapi import APIRouter

from burnlink.contexts.secret_messages.adapters.inbound import build_secret_messages_router
from burnlink.contexts.secret_messages.adapters.outbound import (
    AesGcmSecretCipher,
    InMemorySecretRepository,
    PostgresSecretRepository,
    PsycopgSecretsPostgresGateway,
    SystemSecretsClock,
    Uuid4SecretIdGenerator,
)
from burnlink.contexts.secret_messages.application import SecretRepository
from burnlink.contexts.secret_messages.application.use_cases import (
    DEFAULT_MAX_MESSAGE_BYTES,
    DEFAULT_MAX_TTL_SECONDS,
    ConsumeSecretUseCase,
    CreateSecretUseCase,
)

log = logging.getLogger(__name__)

_ENV_NAME_KEY = "BURNLINK_ENV"
_SECRETS_FAIL_FAST_KEY = "SECRETS_FAIL_FAST"
_SECRETS_MASTER_KEY_B64_KEY = "SECRETS_MASTER_KEY_B64"
_SECRETS_PG_DSN_KEY = "SECRETS_PG_DSN"
_SECRETS_PUBLIC_BASE_URL_KEY = "SECRETS_PUBLIC_BASE_URL"
_SECRETS_STORE_TIMEOUT_SECONDS_KEY = "SECRETS_STORE_TIMEOUT_SECONDS"
_SECRETS_MAX_MESSAGE_BYTES_KEY = "SECRETS_MAX_MESSAGE_BYTES"
_SECRETS_MAX_TTL_SECONDS_KEY = "SECRETS_MAX_TTL_SECONDS"
_ALLOWED_ENVS = ("dev", "prod", "test")
_DEFAULT_PUBLIC_BASE_URL = "http://localhost:3000"
_DEFAULT_STORE_TIMEOUT_SECONDS = 5
# Public dev-only key; fail-fast mode requires SECRETS_MASTER_KEY_B64.
_DEV_MASTER_KEY_B64 = base64.b64encode(b"burnlink-dev-master-key-32bytes!").decode("ascii")


@dataclass(frozen=True, slots=True)
class SecretMessagesRuntimeSettings:
    """
    SecretMessagesRuntimeSettings — runtime policy for secret messages wiring.

    `public_base_url` is the origin of the reader UI, not of this API: links are
    `{public_base_url}/message/{id}` and the UI page behind them calls
    `GET /api/messages/{id}` to reveal the secret.

    Related:
      - apps/api/wiring/modules/secret_messages.py
      - apps/api/main/app.py
      - src/burnlink/contexts/secret_messages/application/use_cases/create_secret.py
    """

    env_name: str
    fail_fast: bool
    master_key_b64: str
    postgres_dsn: str
    public_base_url: str
    store_timeout_seconds: int
    max_message_bytes: int
    max_ttl_seconds: int

    def __post_init__(self) -> None:
        """
        Validate secret messages runtime settings invariants.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Values are normalized by resolver before dataclass construction.
        Raises:
            ValueError: If one of invariants is violated.
        Side Effects:
            None.
        """
        if self.env_name not in _ALLOWED_ENVS:
            raise ValueError(
                f"SecretMessagesRuntimeSettings.env_name must be one of {_ALLOWED_ENVS}, "
                f"got {self.env_name!r}"
            )
        if not self.master_key_b64:
            raise ValueError("SecretMessagesRuntimeSettings.master_key_b64 must be non-empty")
        if not self.public_base_url.startswith(("http://", "https://")):
            raise ValueError(
                "SecretMessagesRuntimeSettings.public_base_url must start with http:// or https://"
            )
        if self.store_timeout_seconds <= 0:
            raise ValueError("SecretMessagesRuntimeSettings.store_timeout_seconds must be > 0")
        if self.max_message_bytes <= 0:
            raise ValueError("SecretMessagesRuntimeSettings.max_message_bytes must be > 0")
        if self.max_ttl_seconds <= 0:
            raise ValueError("SecretMessagesRuntimeSettings.max_ttl_seconds must be > 0")


def build_secret_messages_api_router(*, environ: Mapping[str, str]) -> APIRouter:
    """
    Build fully wired secret messages router from environment settings.

    Related: burnlink.contexts.secret_messages.adapters.inbound.api.routes.secret_messages,
      burnlink.contexts.secret_messages.adapters.outbound,
      apps.api.main.app

    Args:
        environ: Runtime environment mapping.
    Returns:
        APIRouter: Secret messages router with all dependencies wired.
    Assumptions:
        Fail-fast policy is resolved by `_resolve_secret_messages_runtime_settings`.
    Raises:
        ValueError: If fail-fast settings require missing values or values are invalid.
    Side Effects:
        None.
    """
    settings = _resolve_secret_messages_runtime_settings(environ=environ)
    clock = SystemSecretsClock()
    cipher = AesGcmSecretCipher.from_b64(settings.master_key_b64)
    repository = _build_secret_repository(settings=settings)

    create_use_case = CreateSecretUseCase(
        repository=repository,
        cipher=cipher,
        id_generator=Uuid4SecretIdGenerator(),
        clock=clock,
        public_base_url=settings.public_base_url,
        max_message_bytes=settings.max_message_bytes,
        max_ttl_seconds=settings.max_ttl_seconds,
    )
    consume_use_case = ConsumeSecretUseCase(
        repository=repository,
        cipher=cipher,
        clock=clock,
    )
    return build_secret_messages_router(
        create_use_case=create_use_case,
        consume_use_case=consume_use_case,
    )



def _build_secret_repository(*, settings: SecretMessagesRuntimeSettings) -> SecretRepository:
    """
    Build secret repository adapter based on runtime DSN availability.

    Args:
        settings: Resolved runtime settings.
    Returns:
        SecretRepository: Postgres or in-memory adapter.
    Assumptions:
        In-memory storage is acceptable only for single-process dev/test runs.
    Raises:
        ValueError: If Postgres DSN is malformed for gateway construction.
    Side Effects:
        None.
    """
    if settings.postgres_dsn:
        gateway = PsycopgSecretsPostgresGateway(
            dsn=settings.postgres_dsn,
            timeout_seconds=settings.store_timeout_seconds,
        )
        return PostgresSecretRepository(gateway=gateway)
    log.warning(
        "event=secret_store_in_memory env=%s reason=%s_not_set",
        settings.env_name,
        _SECRETS_PG_DSN_KEY,
    )
    return InMemorySecretRepository(lock_timeout_seconds=settings.store_timeout_seconds)



def _resolve_secret_messages_runtime_settings(
    *,
    environ: Mapping[str, str],
) -> SecretMessagesRuntimeSettings:
    """
    Resolve secret messages runtime settings with fail-fast policy and defaults.

    Args:
        environ: Runtime environment mapping.
    Returns:
        SecretMessagesRuntimeSettings: Validated normalized settings.
    Assumptions:
        Missing `BURNLINK_ENV` defaults to `dev`.
    Raises:
        ValueError: If env values are invalid or fail-fast policy requires missing values.
    Side Effects:
        None.
    """
    env_name = _resolve_env_name(environ=environ)
    fail_fast = _resolve_fail_fast(environ=environ, env_name=env_name)

    master_key_b64 = environ.get(_SECRETS_MASTER_KEY_B64_KEY, "").strip()
    postgres_dsn = environ.get(_SECRETS_PG_DSN_KEY, "").strip()
    if fail_fast:
        if not master_key_b64:
            raise ValueError(
                f"{_SECRETS_MASTER_KEY_B64_KEY} must be set when {_SECRETS_FAIL_FAST_KEY}=true"
            )
        if not postgres_dsn:
            raise ValueError(
                f"{_SECRETS_PG_DSN_KEY} must be set when {_SECRETS_FAIL_FAST_KEY}=true"
            )

    public_base_url = (
        environ.get(_SECRETS_PUBLIC_BASE_URL_KEY, "").strip().rstrip("/")
        or _DEFAULT_PUBLIC_BASE_URL
    )
    return SecretMessagesRuntimeSettings(
        env_name=env_name,
        fail_fast=fail_fast,
        master_key_b64=master_key_b64 or _DEV_MASTER_KEY_B64,
        postgres_dsn=postgres_dsn,
        public_base_url=public_base_url,
        store_timeout_seconds=_resolve_positive_int(
            environ=environ,
            key=_SECRETS_STORE_TIMEOUT_SECONDS_KEY,
            default=_DEFAULT_STORE_TIMEOUT_SECONDS,
        ),
        max_message_bytes=_resolve_positive_int(
            environ=environ,
            key=_SECRETS_MAX_MESSAGE_BYTES_KEY,
            default=DEFAULT_MAX_MESSAGE_BYTES,
        ),
        max_ttl_seconds=_resolve_positive_int(
            environ=environ,
            key=_SECRETS_MAX_TTL_SECONDS_KEY,
            default=DEFAULT_MAX_TTL_SECONDS,
        ),
    )



def _resolve_env_name(*, environ: Mapping[str, str]) -> str:
    raw_env_name = environ.get(_ENV_NAME_KEY, "dev").strip().lower()
    if raw_env_name not in _ALLOWED_ENVS:
        raise ValueError(
            f"{_ENV_NAME_KEY} must be one of {_ALLOWED_ENVS}, got {raw_env_name!r}"
        )
    return raw_env_name



def _resolve_fail_fast(*, environ: Mapping[str, str], env_name: str) -> bool:
    """
    Resolve fail-fast policy for secret messages startup validation.

    Args:
        environ: Runtime environment mapping.
        env_name: Normalized environment name.
    Returns:
        bool: Effective fail-fast flag.
    Assumptions:
        Default is enabled for `prod` and disabled for `dev`/`test`.
    Raises:
        ValueError: If override value is not parseable as boolean.
    Side Effects:
        None.
    """
    default_fail_fast = env_name == "prod"
    raw_override = environ.get(_SECRETS_FAIL_FAST_KEY, "").strip()
    if not raw_override:
        return default_fail_fast
    return _parse_bool(raw_value=raw_override, key=_SECRETS_FAIL_FAST_KEY)



def _resolve_positive_int(*, environ: Mapping[str, str], key: str, default: int) -> int:
    """
    Resolve positive integer env setting with fallback default.

    Args:
        environ: Runtime environment mapping.
        key: Environment variable key.
        default: Fallback integer.
    Returns:
        int: Positive integer value.
    Assumptions:
        Empty env value means default should be used.
    Raises:
        ValueError: If value is not parseable or non-positive.
    Side Effects:
        None.
    """
    raw_value = environ.get(key, "").strip()
    if not raw_value:
        return default
    try:
        parsed = int(raw_value)
    except ValueError as error:
        raise ValueError(f"{key} must be integer, got {raw_value!r}") from error
    if parsed <= 0:
        raise ValueError(f"{key} must be > 0, got {parsed}")
    return parsed



def _parse_bool(*, raw_value: str, key: str) -> bool:
    normalized = raw_value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValueError(
        f"{key} must be a boolean literal (1/0/true/false/yes/no/on/off), got {raw_value!r}"
    )
