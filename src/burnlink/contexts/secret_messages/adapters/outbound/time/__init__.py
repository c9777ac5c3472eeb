from .system_secrets_clock import SystemSecretsClock

__all__ = [
    "SystemSecretsClock",
]
