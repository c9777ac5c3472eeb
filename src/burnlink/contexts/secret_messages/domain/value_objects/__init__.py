from .destroy_mode import DestroyMode
from .secret_id import SecretId

__all__ = [
    "DestroyMode",
    "SecretId",
]
