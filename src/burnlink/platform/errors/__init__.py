from .burnlink_error import BurnlinkError

__all__ = [
    "BurnlinkError",
]
