from .secret_messages import (
    ConsumeSecretMessageResponse,
    CreateSecretMessageRequest,
    CreateSecretMessageResponse,
    build_secret_messages_router,
)

__all__ = [
    "ConsumeSecretMessageResponse",
    "CreateSecretMessageRequest",
    "CreateSecretMessageResponse",
    "build_secret_messages_router",
]
