from .api import build_secret_messages_router

__all__ = [
    "build_secret_messages_router",
]
