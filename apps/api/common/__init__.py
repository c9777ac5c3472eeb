from .errors import (
    burnlink_error_handler,
    register_api_error_handlers,
    request_validation_error_handler,
    unexpected_error_handler,
)

__all__ = [
    "burnlink_error_handler",
    "register_api_error_handlers",
    "request_validation_error_handler",
    "unexpected_error_handler",
]
