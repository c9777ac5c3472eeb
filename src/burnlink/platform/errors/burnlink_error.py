from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence


@dataclass(frozen=True, slots=True)
class BurnlinkError(Exception):
    """
    BurnlinkError — canonical platform-level error contract for API boundaries.

    Related:
      - apps/api/common/errors.py
      - apps/api/main/app.py
    """

    code: str
    message: str
    details: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        """
        Validate canonical error fields and freeze details into deterministic plain payloads.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            `code` is a stable machine-readable token used for HTTP mapping.
        Raises:
            ValueError: If `code` or `message` are blank.
            TypeError: If `details` is not mapping-compatible when provided.
        Side Effects:
            Mutates internal frozen dataclass slot `details` with normalized payload copy.
        """
        normalized_code = self.code.strip()
        normalized_message = self.message.strip()
        if not normalized_code:
            raise ValueError("BurnlinkError.code must be non-empty")
        if not normalized_message:
            raise ValueError("BurnlinkError.message must be non-empty")

        object.__setattr__(self, "code", normalized_code)
        object.__setattr__(self, "message", normalized_message)

        if self.details is None:
            return
        if not isinstance(self.details, Mapping):
            raise TypeError("BurnlinkError.details must be a mapping when provided")
        object.__setattr__(self, "details", _normalize_payload_value(value=dict(self.details)))

    def to_payload(self) -> dict[str, Any]:
        details_payload: Mapping[str, Any] = self.details if self.details is not None else {}
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": dict(details_payload),
            }
        }



def _normalize_payload_value(*, value: Any) -> Any:
    """
    Normalize nested payload values into deterministic plain-Python structures.

    Args:
        value: Any JSON-compatible value.
    Returns:
        Any: Normalized scalar/list/dict representation.
    Assumptions:
        Non-JSON values are stringified for safe deterministic error payloads.
    Raises:
        None.
    Side Effects:
        None.
    """
    if isinstance(value, Mapping):
        return {
            str(raw_key): _normalize_payload_value(value=raw_value)
            for raw_key, raw_value in sorted(value.items(), key=lambda item: str(item[0]))
        }

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [_normalize_payload_value(value=item) for item in value]

    if isinstance(value, (str, int, float, bool)) or value is None:
        return value

    return str(value)
