"""
FastAPI application factory for Burnlink API.
"""

from __future__ import annotations

import os
from typing import Mapping

from fastapi import FastAPI

from apps.api.common import register_api_error_handlers
from apps.api.wiring.modules import build_secret_messages_api_router


def create_app(*, environ: Mapping[str, str] | None = None) -> FastAPI:
    """
    Build FastAPI app with secret messages module wired at startup.

    Related: apps.api.wiring.modules.secret_messages,
      apps.api.common.errors,
      burnlink.contexts.secret_messages.adapters.inbound.api.routes.secret_messages

    Args:
        environ: Optional environment mapping override.
    Returns:
        FastAPI: Application instance with registered routers.
    Assumptions:
        Module wiring performs fail-fast validation before first request.
    Raises:
        ValueError: If secret messages runtime settings are invalid or missing in prod.
    Side Effects:
        Validates runtime settings and builds storage adapters.
    """
    effective_environ = os.environ if environ is None else environ

    app = FastAPI(
        title="Burnlink API",
        version="1.0.0",
    )
    register_api_error_handlers(app=app)
    app.include_router(build_secret_messages_api_router(environ=effective_environ))

    @app.get("/health")
    def get_health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
