from __future__ import annotations

import argparse
import json
import logging
import os
from dataclasses import asdict, dataclass
from typing import Mapping, Sequence

from burnlink.contexts.secret_messages.adapters.outbound import (
    PostgresSecretRepository,
    PsycopgSecretsPostgresGateway,
    SystemSecretsClock,
)
from burnlink.contexts.secret_messages.application.use_cases import (
    SecretStorageError,
    SweepExpiredSecretsUseCase,
)

log = logging.getLogger(__name__)

_SECRETS_PG_DSN_KEY = "SECRETS_PG_DSN"


@dataclass(frozen=True, slots=True)
class PurgeExpiredReport:
    purged: int
    cutoff: str


class PurgeExpiredCli:
    """
    PurgeExpiredCli — one-shot purge of expired on-expiry secrets (cron alternative to worker).

    Related:
      - src/burnlink/contexts/secret_messages/application/use_cases/sweep_expired_secrets.py
      - apps/worker/secrets_sweeper/wiring/modules/secrets_sweeper.py
    """

    def __init__(self, *, environ: Mapping[str, str] | None = None) -> None:
        self._environ = os.environ if environ is None else environ

    def run(self, argv: Sequence[str]) -> int:
        ns = _build_parser().parse_args(list(argv))

        dsn = self._environ.get(_SECRETS_PG_DSN_KEY, "").strip()
        if not dsn:
            print(f"{_SECRETS_PG_DSN_KEY} is required for purge-expired")
            return 2

        try:
            gateway = PsycopgSecretsPostgresGateway(dsn=dsn, timeout_seconds=ns.timeout_seconds)
        except ValueError as error:
            print(f"invalid purge-expired settings: {error}")
            return 1

        use_case = SweepExpiredSecretsUseCase(
            repository=PostgresSecretRepository(gateway=gateway),
            clock=SystemSecretsClock(),
        )
        try:
            outcome = use_case.sweep_with_cutoff()
        except SecretStorageError:
            log.exception("event=purge_expired_failed")
            print("purge-expired failed: secret messages storage is unavailable")
            return 1

        report = PurgeExpiredReport(purged=outcome.purged, cutoff=outcome.cutoff.isoformat())

        if ns.report_format == "json":
            print(json.dumps(asdict(report), ensure_ascii=False))
        else:
            print(
                "purge-expired report:\n"
                f"- purged: {report.purged}\n"
                f"- cutoff: {report.cutoff}\n"
            )
        return 0


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="purge-expired")
    p.add_argument(
        "--timeout-seconds",
        type=float,
        default=30.0,
        help="Connect/statement timeout for the purge query (default: 30)",
    )
    p.add_argument(
        "--report-format",
        choices=["text", "json"],
        default="text",
        help="Report output format (default: text)",
    )
    return p
