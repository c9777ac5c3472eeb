from __future__ import annotations


class SecretsOperationError(ValueError):
    """
    SecretsOperationError — deterministic application error for secret lifecycle flows.

    Related:
      - src/burnlink/contexts/secret_messages/application/use_cases/create_secret.py
      - src/burnlink/contexts/secret_messages/application/use_cases/consume_secret.py
      - src/burnlink/contexts/secret_messages/adapters/inbound/api/routes/secret_messages.py
    """

    def __init__(self, *, code: str, message: str, status_code: int) -> None:
        """
        Initialize deterministic operation error fields for transport mapping.

        Args:
            code: Machine-readable deterministic error code.
            message: Human-readable message safe for external callers.
            status_code: HTTP status expected by inbound adapters.
        Returns:
            None.
        Assumptions:
            Message never contains plaintext, key material, or storage internals.
        Raises:
            None.
        Side Effects:
            None.
        """
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code

    def payload(self) -> dict[str, str]:
        """
        Build deterministic payload with stable key order.

        Args:
            None.
        Returns:
            dict[str, str]: `{"error": "...", "message": "..."}` payload.
        Assumptions:
            Payload is used as HTTPException detail.
        Raises:
            None.
        Side Effects:
            None.
        """
        return {
            "error": self.code,
            "message": self.message,
        }


class SecretValidationError(SecretsOperationError):
    """
    SecretValidationError — user-correctable 400 for invalid create request.
    """

    def __init__(self, *, message: str = "Secret message request is invalid.") -> None:
        super().__init__(
            code="invalid_secret_request",
            message=message,
            status_code=400,
        )


class SecretNotFoundError(SecretsOperationError):
    """
    SecretNotFoundError — opaque 404 for absent secret.

    Never-existed, already-consumed, expired, and corrupted states are intentionally
    collapsed so probing callers learn nothing about a link's lifecycle.
    """

    def __init__(self) -> None:
        super().__init__(
            code="secret_not_found",
            message="Secret message was not found.",
            status_code=404,
        )


class SecretStorageError(SecretsOperationError):
    """
    SecretStorageError — 500 for unavailable or timed-out secret storage.

    Outcome is ambiguous and is never retried by the engine.
    """

    def __init__(self) -> None:
        super().__init__(
            code="secret_storage_unavailable",
            message="Secret storage is temporarily unavailable.",
            status_code=500,
        )


class SecretCorruptionError(Exception):
    """
    SecretCorruptionError — stored record failed integrity or encoding checks.

    Internal operator signal only; callers receive `SecretNotFoundError`.
    """

    def __init__(self, *, secret_id: str, reason: str) -> None:
        super().__init__(f"Secret record {secret_id} is corrupted: {reason}")
        self.secret_id = secret_id
        self.reason = reason
