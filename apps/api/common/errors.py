"""
Shared API error handlers for BurnlinkError contract, deterministic 422 payloads,
and opaque 500 responses for unexpected failures.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence, cast

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse

from burnlink.platform.errors import BurnlinkError

log = logging.getLogger(__name__)

_BURNLINK_STATUS_BY_CODE: Mapping[str, int] = {
    "validation_error": 422,
    "unexpected_error": 500,
}


def register_api_error_handlers(*, app: FastAPI) -> None:
    """
    Register global API handlers for BurnlinkError, validation errors, and crashes.

    Args:
        app: FastAPI application instance.
    Returns:
        None.
    Assumptions:
        Handlers are installed once during application startup.
    Raises:
        ValueError: If `app` dependency is missing.
    Side Effects:
        Mutates FastAPI exception-handler registry.
    """
    if app is None:  # type: ignore[truthy-bool]
        raise ValueError("register_api_error_handlers requires app")

    app.add_exception_handler(BurnlinkError, burnlink_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)



def burnlink_error_handler(_request: Request, error: Exception) -> JSONResponse:
    """
    Convert BurnlinkError into deterministic JSON response payload.

    Args:
        _request: Starlette request object (unused).
        error: Raised BurnlinkError instance.
    Returns:
        JSONResponse: Response with contract payload `{"error": ...}`.
    Assumptions:
        Status code is derived from `BurnlinkError.code` via stable mapping table.
    Raises:
        None.
    Side Effects:
        None.
    """
    burnlink_error = cast(BurnlinkError, error)
    status_code = _BURNLINK_STATUS_BY_CODE.get(burnlink_error.code, 500)
    return JSONResponse(status_code=status_code, content=burnlink_error.to_payload())



def request_validation_error_handler(_request: Request, error: Exception) -> JSONResponse:
    """
    Convert FastAPI RequestValidationError to canonical `validation_error` payload.

    Args:
        _request: Starlette request object (unused).
        error: Raised validation exception from FastAPI/Pydantic.
    Returns:
        JSONResponse: HTTP 422 payload with deterministically sorted `details.errors` list.
    Assumptions:
        Input values are not echoed back, so a rejected message body never leaks.
    Raises:
        None.
    Side Effects:
        None.
    """
    validation_error = cast(RequestValidationError, error)
    burnlink_error = BurnlinkError(
        code="validation_error",
        message="Validation failed",
        details={
            "errors": _sorted_validation_errors(raw_errors=validation_error.errors()),
        },
    )
    return burnlink_error_handler(_request, burnlink_error)



def unexpected_error_handler(request: Request, error: Exception) -> JSONResponse:
    """
    Log unexpected exception and return opaque 500 payload.

    Args:
        request: Starlette request object.
        error: Unhandled exception.
    Returns:
        JSONResponse: HTTP 500 payload without internal detail.
    Assumptions:
        Stack traces go to logs only.
    Raises:
        None.
    Side Effects:
        Writes one ERROR log record with traceback.
    """
    log.error(
        "event=unhandled_api_error method=%s path=%s error=%s",
        request.method,
        request.url.path,
        type(error).__name__,
        exc_info=error,
    )
    burnlink_error = BurnlinkError(
        code="unexpected_error",
        message="Internal server error",
    )
    return burnlink_error_handler(request, burnlink_error)



def _sorted_validation_errors(*, raw_errors: Any) -> list[dict[str, str]]:
    """
    Convert raw validation errors into deterministic list sorted by path, code, and message.

    Args:
        raw_errors: Raw iterable from FastAPI validation subsystem.
    Returns:
        list[dict[str, str]]: Sorted normalized validation items.
    Assumptions:
        Unknown raw shapes are stringified for deterministic payload stability.
    Raises:
        None.
    Side Effects:
        None.
    """
    if not isinstance(raw_errors, Sequence) or isinstance(raw_errors, (str, bytes, bytearray)):
        return []

    normalized_items: list[dict[str, str]] = []
    for raw_error in raw_errors:
        if not isinstance(raw_error, Mapping):
            normalized_items.append(
                {
                    "path": "unknown",
                    "code": "validation_error",
                    "message": str(raw_error),
                }
            )
            continue
        normalized_items.append(
            {
                "path": _normalize_error_path(loc=raw_error.get("loc")),
                "code": _normalize_error_code(raw_type=raw_error.get("type")),
                "message": str(raw_error.get("msg", "Validation error")),
            }
        )

    return sorted(
        normalized_items,
        key=lambda item: (item["path"], item["code"], item["message"]),
    )



def _normalize_error_path(*, loc: Any) -> str:
    if isinstance(loc, Sequence) and not isinstance(loc, (str, bytes, bytearray)):
        path_parts = [str(part) for part in loc]
        if path_parts:
            return ".".join(path_parts)
    if loc is None:
        return "unknown"
    return str(loc)



def _normalize_error_code(*, raw_type: Any) -> str:
    """
    Normalize raw validation error type into stable machine-readable code.

    Args:
        raw_type: Raw `type` value from validation error mapping.
    Returns:
        str: Stable error code.
    Assumptions:
        Missing required fields are represented with Pydantic `missing` type.
    Raises:
        None.
    Side Effects:
        None.
    """
    if raw_type is None:
        return "validation_error"

    normalized = str(raw_type).strip().lower()
    if not normalized:
        return "validation_error"

    if normalized == "missing" or normalized.endswith(".missing"):
        return "required"

    return normalized
