from __future__ import annotations

from datetime import datetime
from typing import Literal

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, StrictFloat, StrictInt

from burnlink.contexts.secret_messages.application.use_cases.consume_secret import (
    ConsumeSecretUseCase,
)
from burnlink.contexts.secret_messages.application.use_cases.create_secret import (
    CreateSecretUseCase,
)
from burnlink.contexts.secret_messages.application.use_cases.errors import (
    SecretsOperationError,
)
from burnlink.contexts.secret_messages.application.use_cases.models import (
    ConsumedSecretView,
    CreatedSecretView,
)
from burnlink.contexts.secret_messages.domain.value_objects import DestroyMode


class CreateSecretMessageRequest(BaseModel):
    """
    CreateSecretMessageRequest — API payload for `POST /api/messages`.

    Value rules (non-blank message, known mode, positive ttl) are enforced by
    `CreateSecretUseCase` so they map to 400 rather than 422.

    Related:
      - src/burnlink/contexts/secret_messages/application/use_cases/create_secret.py
      - apps/api/wiring/modules/secret_messages.py
    """

    message: str
    mode: str
    ttl: StrictInt | StrictFloat | None = None


class CreateSecretMessageResponse(BaseModel):
    """
    CreateSecretMessageResponse — shareable link for created secret message.
    """

    link: str
    id: str
    destroy_mode: Literal["view", "time"]
    expires_at: datetime | None


class ConsumeSecretMessageResponse(BaseModel):
    """
    ConsumeSecretMessageResponse — decrypted message returned once to the reader.
    """

    message: str
    destroy_mode: Literal["view", "time"]
    expires_at: datetime | None


def build_secret_messages_router(
    *,
    create_use_case: CreateSecretUseCase,
    consume_use_case: ConsumeSecretUseCase,
) -> APIRouter:
    """
    Build router exposing secret message create and one-time consume endpoints.

    Related:
      - src/burnlink/contexts/secret_messages/application/use_cases/create_secret.py
      - src/burnlink/contexts/secret_messages/application/use_cases/consume_secret.py
      - apps/api/wiring/modules/secret_messages.py

    Args:
        create_use_case: Secret creation use-case.
        consume_use_case: Secret consumption use-case.
    Returns:
        APIRouter: Configured secret messages router.
    Assumptions:
        Handlers are sync and run in FastAPI threadpool, so consumption calls race
        for real; atomicity is owned by the repository.
        Created links point at the reader UI (`/message/{id}`), which calls the
        consume endpoint; this router serves no HTML page.
    Raises:
        ValueError: If required dependencies are missing.
    Side Effects:
        None.
    """
    if create_use_case is None:  # type: ignore[truthy-bool]
        raise ValueError("build_secret_messages_router requires create_use_case")
    if consume_use_case is None:  # type: ignore[truthy-bool]
        raise ValueError("build_secret_messages_router requires consume_use_case")

    router = APIRouter(tags=["secret_messages"])

    @router.post("/api/messages", response_model=CreateSecretMessageResponse, status_code=201)
    def post_secret_message(request: CreateSecretMessageRequest) -> CreateSecretMessageResponse:
        """
        Encrypt and store one message, returning its one-time link.

        Args:
            request: Secret message create payload.
        Returns:
            CreateSecretMessageResponse: Link plus id and deadline.
        Assumptions:
            `ttl` is ignored for `view` mode.
        Raises:
            HTTPException: 400 for invalid request, 500 for storage failure.
        Side Effects:
            Writes one secret record in storage.
        """
        try:
            result = create_use_case.create(
                message=request.message,
                mode=request.mode,
                ttl_seconds=request.ttl,
            )
        except SecretsOperationError as error:
            raise HTTPException(
                status_code=error.status_code,
                detail=error.payload(),
            ) from error
        return _to_create_response(view=result)

    @router.get("/api/messages/{message_id}", response_model=ConsumeSecretMessageResponse)
    def get_secret_message(message_id: str) -> ConsumeSecretMessageResponse:
        """
        Disclose and destroy one secret message.

        Args:
            message_id: Raw identifier path parameter; malformed values yield 404.
        Returns:
            ConsumeSecretMessageResponse: Plaintext and destruction metadata.
        Assumptions:
            Every not-found cause shares one opaque 404 payload.
        Raises:
            HTTPException: 404 for absent secret, 500 for storage failure.
        Side Effects:
            Deletes one secret record in storage.
        """
        try:
            result = consume_use_case.consume(secret_id=message_id)
        except SecretsOperationError as error:
            raise HTTPException(
                status_code=error.status_code,
                detail=error.payload(),
            ) from error
        return _to_consume_response(view=result)

    return router



def _to_create_response(*, view: CreatedSecretView) -> CreateSecretMessageResponse:
    return CreateSecretMessageResponse(
        link=view.link,
        id=str(view.secret_id),
        destroy_mode=_to_wire_mode_literal(mode=view.destroy_mode),
        expires_at=view.expires_at,
    )


def _to_consume_response(*, view: ConsumedSecretView) -> ConsumeSecretMessageResponse:
    return ConsumeSecretMessageResponse(
        message=view.message,
        destroy_mode=_to_wire_mode_literal(mode=view.destroy_mode),
        expires_at=view.expires_at,
    )


def _to_wire_mode_literal(*, mode: DestroyMode) -> Literal["view", "time"]:
    return mode.to_wire_mode()  # type: ignore[return-value]
