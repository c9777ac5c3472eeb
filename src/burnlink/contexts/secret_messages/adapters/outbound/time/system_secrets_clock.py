from __future__ import annotations

from datetime import datetime, timezone

from burnlink.contexts.secret_messages.application.ports.clock import SecretsClock


class SystemSecretsClock(SecretsClock):
    """
    SystemSecretsClock — `SecretsClock` backed by system UTC wall clock.

    Related:
      - src/burnlink/contexts/secret_messages/application/ports/clock.py
      - apps/api/wiring/modules/secret_messages.py
      - apps/worker/secrets_sweeper/wiring/modules/secrets_sweeper.py
    """

    def now(self) -> datetime:
        """
        Return current timezone-aware UTC datetime.

        Args:
            None.
        Returns:
            datetime: Current UTC datetime.
        Assumptions:
            All engine instances and the sweeper share NTP-synchronized clocks.
        Raises:
            None.
        Side Effects:
            Reads system wall clock.
        """
        return datetime.now(timezone.utc)
