from __future__ import annotations

from uuid import uuid4

from burnlink.contexts.secret_messages.application.ports.secret_id_generator import (
    SecretIdGenerator,
)
from burnlink.contexts.secret_messages.domain.value_objects import SecretId


class Uuid4SecretIdGenerator(SecretIdGenerator):
    """
    Uuid4SecretIdGenerator — random UUIDv4 identifiers backed by `os.urandom`.
    """

    def next_id(self) -> SecretId:
        return SecretId(uuid4())
