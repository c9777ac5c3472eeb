from __future__ import annotations

from datetime import datetime
from typing import Protocol


class SecretsClock(Protocol):
    """
    SecretsClock — port of current time for secret lifecycle use-cases.

    Related:
      - src/burnlink/contexts/secret_messages/application/use_cases/create_secret.py
      - src/burnlink/contexts/secret_messages/application/use_cases/consume_secret.py
      - src/burnlink/contexts/secret_messages/adapters/outbound/time/system_secrets_clock.py
    """

    def now(self) -> datetime:
        """
        Return current UTC timestamp used for expiry computation and checks.

        Args:
            None.
        Returns:
            datetime: Timezone-aware UTC datetime.
        Assumptions:
            Implementations return wall-clock time shared by every engine instance.
        Raises:
            None.
        Side Effects:
            None.
        """
        ...
