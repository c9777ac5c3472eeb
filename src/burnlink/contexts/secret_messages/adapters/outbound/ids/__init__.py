from .uuid4_secret_id_generator import Uuid4SecretIdGenerator

__all__ = [
    "Uuid4SecretIdGenerator",
]
