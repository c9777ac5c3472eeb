from .modules import SecretMessagesRuntimeSettings, build_secret_messages_api_router

__all__ = [
    "SecretMessagesRuntimeSettings",
    "build_secret_messages_api_router",
]
