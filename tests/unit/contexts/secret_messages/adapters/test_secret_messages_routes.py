from __future__ import annotations

from datetime import datetime, timedelta, timezone
from uuid import uuid4

from fastapi import FastAPI
from fastapi.testclient import TestClient

from apps.api.common import register_api_error_handlers
from burnlink.contexts.secret_messages.adapters.inbound import build_secret_messages_router
from burnlink.contexts.secret_messages.adapters.outbound import (
    AesGcmSecretCipher,
    InMemorySecretRepository,
    Uuid4SecretIdGenerator,
)
from burnlink.contexts.secret_messages.application.ports import SecretStoreUnavailableError
from burnlink.contexts.secret_messages.application.use_cases import (
    ConsumeSecretUseCase,
    CreateSecretUseCase,
)

_START = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)
_NOT_FOUND_BODY = {
    "detail": {
        "error": "secret_not_found",
        "message": "Secret message was not found.",
    }
}


class _MutableClock:
    def __init__(self, now: datetime) -> None:
        self._now = now

    def now(self) -> datetime:
        return self._now

    def advance(self, *, seconds: float) -> None:
        self._now = self._now + timedelta(seconds=seconds)


class _UnavailableRepository:
    def insert(self, *, record):
        raise SecretStoreUnavailableError("connection refused")

    def fetch_and_delete_if(self, *, secret_id, predicate):
        raise SecretStoreUnavailableError("connection refused")


class _ExplodingRepository:
    def fetch_and_delete_if(self, *, secret_id, predicate):
        raise RuntimeError("driver bug with internal detail")


def _client(*, repository=None, clock=None, raise_server_exceptions: bool = True) -> TestClient:
    """
    Build test client for secret messages router over in-memory dependencies.

    Args:
        repository: Optional repository override.
        clock: Optional clock override.
        raise_server_exceptions: Forwarded to TestClient; disabled for 500 contract checks.
    Returns:
        TestClient: Configured API client.
    Assumptions:
        Global API error handlers are registered exactly as in production app.
    Raises:
        None.
    Side Effects:
        None.
    """
    repository = repository if repository is not None else InMemorySecretRepository()
    clock = clock if clock is not None else _MutableClock(_START)
    cipher = AesGcmSecretCipher(master_key=bytes(range(32)))
    app = FastAPI()
    register_api_error_handlers(app=app)
    app.include_router(
        build_secret_messages_router(
            create_use_case=CreateSecretUseCase(
                repository=repository,
                cipher=cipher,
                id_generator=Uuid4SecretIdGenerator(),
                clock=clock,
                public_base_url="https://burn.example",
            ),
            consume_use_case=ConsumeSecretUseCase(
                repository=repository,
                cipher=cipher,
                clock=clock,
            ),
        )
    )
    return TestClient(app, raise_server_exceptions=raise_server_exceptions)


def _parse_timestamp(raw: str) -> datetime:
    return datetime.fromisoformat(raw.replace("Z", "+00:00"))


def test_post_view_message_then_get_discloses_once() -> None:
    """
    Verify view-mode link works for the first request only.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Second GET receives the same opaque 404 as a never-issued id.
    Raises:
        AssertionError: If status codes or payloads differ from API contract.
    Side Effects:
        None.
    """
    client = _client()

    created = client.post("/api/messages", json={"message": "Hello", "mode": "view"})

    assert created.status_code == 201
    body = created.json()
    assert body["destroy_mode"] == "view"
    assert body["expires_at"] is None
    assert body["link"] == f"https://burn.example/message/{body['id']}"

    first = client.get(f"/api/messages/{body['id']}")
    second = client.get(f"/api/messages/{body['id']}")

    assert first.status_code == 200
    assert first.json() == {"message": "Hello", "destroy_mode": "view", "expires_at": None}
    assert second.status_code == 404
    assert second.json() == _NOT_FOUND_BODY


def test_post_time_message_expires_after_ttl() -> None:
    clock = _MutableClock(_START)
    client = _client(clock=clock)

    created = client.post("/api/messages", json={"message": "Temp", "mode": "time", "ttl": 1})
    assert created.status_code == 201
    body = created.json()
    assert body["destroy_mode"] == "time"
    assert _parse_timestamp(body["expires_at"]) == _START + timedelta(seconds=1)

    clock.advance(seconds=2)
    response = client.get(f"/api/messages/{body['id']}")

    assert response.status_code == 404
    assert response.json() == _NOT_FOUND_BODY


def test_post_time_message_read_before_deadline_returns_deadline() -> None:
    client = _client()
    created = client.post(
        "/api/messages",
        json={"message": "Temp", "mode": "time", "ttl": 60.5},
    ).json()

    response = client.get(f"/api/messages/{created['id']}")

    assert response.status_code == 200
    assert response.json()["message"] == "Temp"
    assert response.json()["destroy_mode"] == "time"
    assert _parse_timestamp(response.json()["expires_at"]) == _START + timedelta(seconds=60.5)


def test_get_malformed_and_unknown_ids_share_not_found_payload() -> None:
    client = _client()

    malformed = client.get("/api/messages/not-a-uuid")
    unknown = client.get(f"/api/messages/{uuid4()}")

    assert malformed.status_code == 404
    assert unknown.status_code == 404
    assert malformed.json() == unknown.json() == _NOT_FOUND_BODY


def test_post_invalid_values_return_400() -> None:
    client = _client()

    cases = [
        {"message": "", "mode": "view"},
        {"message": "Hello", "mode": "forever"},
        {"message": "Hello", "mode": "time"},
        {"message": "Hello", "mode": "time", "ttl": -5},
        {"message": "Hello", "mode": "time", "ttl": 0},
    ]
    for payload in cases:
        response = client.post("/api/messages", json=payload)

        assert response.status_code == 400, payload
        assert response.json()["detail"]["error"] == "invalid_secret_request"


def test_post_malformed_body_returns_422_without_echoing_input() -> None:
    client = _client()

    missing = client.post("/api/messages", json={"mode": "view"})
    wrong_ttl_type = client.post(
        "/api/messages",
        json={"message": "do-not-echo", "mode": "time", "ttl": "60"},
    )

    assert missing.status_code == 422
    assert missing.json()["error"]["code"] == "validation_error"
    assert missing.json()["error"]["details"]["errors"][0]["path"] == "body.message"
    assert missing.json()["error"]["details"]["errors"][0]["code"] == "required"
    assert wrong_ttl_type.status_code == 422
    assert "do-not-echo" not in wrong_ttl_type.text


def test_storage_failure_returns_500_storage_payload() -> None:
    client = _client(repository=_UnavailableRepository())

    created = client.post("/api/messages", json={"message": "Hello", "mode": "view"})
    consumed = client.get(f"/api/messages/{uuid4()}")

    expected = {
        "detail": {
            "error": "secret_storage_unavailable",
            "message": "Secret storage is temporarily unavailable.",
        }
    }
    assert created.status_code == 500
    assert created.json() == expected
    assert consumed.status_code == 500
    assert consumed.json() == expected


def test_unexpected_failure_returns_opaque_500() -> None:
    client = _client(repository=_ExplodingRepository(), raise_server_exceptions=False)

    response = client.get(f"/api/messages/{uuid4()}")

    assert response.status_code == 500
    assert response.json() == {
        "error": {
            "code": "unexpected_error",
            "message": "Internal server error",
            "details": {},
        }
    }
    assert "internal detail" not in response.text
