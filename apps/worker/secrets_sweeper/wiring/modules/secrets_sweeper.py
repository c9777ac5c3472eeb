from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from time import perf_counter
from typing import Mapping

from prometheus_client import (
    REGISTRY,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    start_http_server,
)

from burnlink.contexts.secret_messages.adapters.outbound import (
    PostgresSecretRepository,
    PsycopgSecretsPostgresGateway,
    SystemSecretsClock,
    load_secrets_sweeper_runtime_config,
)
from burnlink.contexts.secret_messages.application.use_cases import SweepExpiredSecretsUseCase

_LOG = logging.getLogger(__name__)
_SECRETS_PG_DSN_KEY = "SECRETS_PG_DSN"


class SecretsSweeperMetrics:
    """
    Prometheus metrics bundle for expired secrets sweeper worker process.

    Related:
      - apps/worker/secrets_sweeper/wiring/modules/secrets_sweeper.py
      - apps/worker/secrets_sweeper/main/main.py
      - src/burnlink/contexts/secret_messages/application/use_cases/sweep_expired_secrets.py
    """

    def __init__(self, *, registry: CollectorRegistry | None = None) -> None:
        """
        Register sweeper metrics in provided or default Prometheus registry.

        Args:
            registry: Optional registry for tests or custom process setups.
        Returns:
            None.
        Assumptions:
            One metrics bundle exists per registry.
        Raises:
            ValueError: Propagated by Prometheus client on duplicate metric names.
        Side Effects:
            Registers metrics in target registry.
        """
        self.registry = registry or REGISTRY
        self.runs_total = Counter(
            "secrets_sweeper_runs_total",
            "Total sweep iterations attempted.",
            registry=self.registry,
        )
        self.errors_total = Counter(
            "secrets_sweeper_errors_total",
            "Total sweep iterations that failed.",
            registry=self.registry,
        )
        self.purged_total = Counter(
            "secrets_sweeper_purged_total",
            "Total expired secret records purged.",
            registry=self.registry,
        )
        self.run_duration_seconds = Histogram(
            "secrets_sweeper_run_duration_seconds",
            "Duration of one sweep iteration in seconds.",
            buckets=(0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 30.0),
            registry=self.registry,
        )
        self.last_success_unixtime = Gauge(
            "secrets_sweeper_last_success_unixtime",
            "Unix timestamp of the last successful sweep iteration.",
            registry=self.registry,
        )


@dataclass(frozen=True, slots=True)
class SecretsSweeperApp:
    """
    Periodic purge loop wrapper for expired secrets sweeper worker process.

    Related:
      - apps/worker/secrets_sweeper/main/main.py
      - src/burnlink/contexts/secret_messages/application/use_cases/sweep_expired_secrets.py
      - src/burnlink/contexts/secret_messages/application/ports/secret_repository.py
    """

    interval_seconds: float
    sweep_use_case: SweepExpiredSecretsUseCase
    metrics: SecretsSweeperMetrics
    metrics_port: int

    def __post_init__(self) -> None:
        if self.interval_seconds <= 0:
            raise ValueError("SecretsSweeperApp.interval_seconds must be > 0")
        if self.metrics_port <= 0:
            raise ValueError("SecretsSweeperApp.metrics_port must be > 0")
        if self.sweep_use_case is None:  # type: ignore[truthy-bool]
            raise ValueError("SecretsSweeperApp.sweep_use_case is required")
        if self.metrics is None:  # type: ignore[truthy-bool]
            raise ValueError("SecretsSweeperApp.metrics is required")

    def run_once(self) -> int | None:
        """
        Execute one sweep iteration and record its outcome in metrics.

        Args:
            None.
        Returns:
            int | None: Purged record count, or `None` when the iteration failed.
        Assumptions:
            Failures are transient; the next iteration retries the same cutoff logic.
        Raises:
            None.
        Side Effects:
            Deletes expired records and updates Prometheus metrics.
        """
        self.metrics.runs_total.inc()
        started = perf_counter()
        try:
            purged = self.sweep_use_case.sweep()
        except Exception:  # noqa: BLE001
            self.metrics.errors_total.inc()
            _LOG.exception("event=sweep_failed component=secrets-sweeper")
            return None
        finally:
            self.metrics.run_duration_seconds.observe(max(perf_counter() - started, 0.0))

        self.metrics.purged_total.inc(purged)
        self.metrics.last_success_unixtime.set_to_current_time()
        _LOG.debug("event=sweep_completed component=secrets-sweeper purged=%s", purged)
        return purged

    async def run(self, stop_event: asyncio.Event) -> None:
        """
        Run sweep loop until stop event is set.

        Args:
            stop_event: Cooperative shutdown signal from process entrypoint.
        Returns:
            None.
        Assumptions:
            First sweep runs immediately after metrics endpoint starts.
        Raises:
            None.
        Side Effects:
            Starts metrics HTTP server and performs storage IO in loop.
        """
        start_http_server(self.metrics_port, registry=self.metrics.registry)
        _LOG.info(
            "event=metrics_started component=secrets-sweeper metrics_port=%s interval_seconds=%s",
            self.metrics_port,
            self.interval_seconds,
        )

        while not stop_event.is_set():
            await asyncio.to_thread(self.run_once)
            await _wait_with_stop(stop_event=stop_event, timeout_seconds=self.interval_seconds)

        _LOG.info("event=stopped component=secrets-sweeper")


def build_secrets_sweeper_app(
    *,
    config_path: str,
    environ: Mapping[str, str],
    metrics_port: int,
    metrics: SecretsSweeperMetrics | None = None,
) -> SecretsSweeperApp:
    """
    Build fully wired sweeper worker app with fail-fast dependencies.

    Args:
        config_path: Path to `secrets_sweeper.yaml` runtime config.
        environ: Process environment mapping.
        metrics_port: Prometheus metrics HTTP server port.
        metrics: Optional pre-built metrics bundle (tests use isolated registries).
    Returns:
        SecretsSweeperApp: Ready-to-run worker app.
    Assumptions:
        Runtime environment includes `SECRETS_PG_DSN`; in-memory storage has no sweeper.
    Raises:
        ValueError: If required environment/settings are missing or invalid.
        FileNotFoundError: If runtime config cannot be loaded.
    Side Effects:
        Initializes Postgres gateway and runtime dependencies.
    """
    if metrics_port <= 0:
        raise ValueError("build_secrets_sweeper_app metrics_port must be > 0")

    runtime_config = load_secrets_sweeper_runtime_config(Path(config_path))
    secrets_pg_dsn = environ.get(_SECRETS_PG_DSN_KEY, "").strip()
    if not secrets_pg_dsn:
        raise ValueError(f"{_SECRETS_PG_DSN_KEY} is required for secrets sweeper worker")

    gateway = PsycopgSecretsPostgresGateway(
        dsn=secrets_pg_dsn,
        timeout_seconds=runtime_config.store_timeout_seconds,
    )
    sweep_use_case = SweepExpiredSecretsUseCase(
        repository=PostgresSecretRepository(gateway=gateway),
        clock=SystemSecretsClock(),
    )
    return SecretsSweeperApp(
        interval_seconds=runtime_config.interval_seconds,
        sweep_use_case=sweep_use_case,
        metrics=metrics if metrics is not None else SecretsSweeperMetrics(),
        metrics_port=metrics_port,
    )


async def _wait_with_stop(*, stop_event: asyncio.Event, timeout_seconds: float) -> None:
    """
    Wait for stop event with timeout, returning early on cooperative shutdown.

    Args:
        stop_event: Shared shutdown event.
        timeout_seconds: Wait timeout in seconds.
    Returns:
        None.
    Assumptions:
        Timeout is positive and pre-validated by caller.
    Raises:
        None.
    Side Effects:
        Suspends current coroutine for up to timeout duration.
    """
    try:
        await asyncio.wait_for(stop_event.wait(), timeout=timeout_seconds)
    except TimeoutError:
        return
