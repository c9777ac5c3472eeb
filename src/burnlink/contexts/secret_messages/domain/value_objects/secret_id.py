from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, slots=True)
class SecretId:
    """
    SecretId — opaque public identifier of one stored secret message.

    Related:
      - src/burnlink/contexts/secret_messages/domain/entities/secret_record.py
      - src/burnlink/contexts/secret_messages/application/ports/secret_id_generator.py
      - src/burnlink/contexts/secret_messages/adapters/inbound/api/routes/secret_messages.py
    """

    value: UUID

    def __post_init__(self) -> None:
        """
        Validate UUID value type for secret identifier.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            `SecretId` wraps concrete random `uuid.UUID` value.
        Raises:
            ValueError: If `value` is not a UUID instance.
        Side Effects:
            None.
        """
        if not isinstance(self.value, UUID):
            raise ValueError(f"SecretId requires UUID value, got {self.value!r}")

    @classmethod
    def from_string(cls, raw_value: str) -> SecretId:
        """
        Parse secret identifier from its canonical UUID string (link path segment).

        Args:
            raw_value: Raw UUID string.
        Returns:
            SecretId: Parsed identifier value object.
        Assumptions:
            Input comes from untrusted transport and may be garbage.
        Raises:
            ValueError: If value is blank or not UUID-compatible.
        Side Effects:
            None.
        """
        stripped = raw_value.strip()
        if not stripped:
            raise ValueError("SecretId.from_string requires non-empty value")
        return cls(UUID(stripped))

    def __str__(self) -> str:
        return str(self.value)
