from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from burnlink.contexts.secret_messages.domain.value_objects import DestroyMode, SecretId


@dataclass(frozen=True, slots=True)
class CreatedSecretView:
    """
    CreatedSecretView — result of secret creation handed back to the link creator.

    Related:
      - src/burnlink/contexts/secret_messages/application/use_cases/create_secret.py
      - src/burnlink/contexts/secret_messages/adapters/inbound/api/routes/secret_messages.py
    """

    secret_id: SecretId
    link: str
    destroy_mode: DestroyMode
    expires_at: datetime | None


@dataclass(frozen=True, slots=True)
class ConsumedSecretView:
    """
    ConsumedSecretView — decrypted plaintext plus metadata for the one reader.

    Related:
      - src/burnlink/contexts/secret_messages/application/use_cases/consume_secret.py
      - src/burnlink/contexts/secret_messages/adapters/inbound/api/routes/secret_messages.py
    """

    secret_id: SecretId
    message: str
    destroy_mode: DestroyMode
    expires_at: datetime | None


@dataclass(frozen=True, slots=True)
class ExpiredSecretsSweep:
    """
    ExpiredSecretsSweep — outcome of one expired secrets purge.

    Related:
      - src/burnlink/contexts/secret_messages/application/use_cases/sweep_expired_secrets.py
      - apps/cli/commands/purge_expired.py
    """

    purged: int
    cutoff: datetime
