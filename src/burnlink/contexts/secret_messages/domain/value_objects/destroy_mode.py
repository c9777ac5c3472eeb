from __future__ import annotations

from enum import Enum


class DestroyMode(str, Enum):
    """
    DestroyMode — destruction policy of a stored secret message.

    `on_read` records are destroyed by the first successful consumption.
    `on_expiry` records are destroyed by consumption or once `expires_at` passes,
    whichever comes first.
    """

    ON_READ = "on_read"
    ON_EXPIRY = "on_expiry"

    @classmethod
    def from_wire_mode(cls, raw_mode: str) -> DestroyMode:
        """
        Map transport mode literal (`view` / `time`) into destruction policy.

        Args:
            raw_mode: Mode literal sent by link creator.
        Returns:
            DestroyMode: Matching destruction policy.
        Assumptions:
            Literal is compared exactly; case or whitespace variants are rejected.
        Raises:
            ValueError: If literal is not `view` or `time`.
        Side Effects:
            None.
        """
        if raw_mode == "view":
            return cls.ON_READ
        if raw_mode == "time":
            return cls.ON_EXPIRY
        raise ValueError(f"Unsupported destroy mode literal: {raw_mode!r}")

    def to_wire_mode(self) -> str:
        if self is DestroyMode.ON_READ:
            return "view"
        return "time"
