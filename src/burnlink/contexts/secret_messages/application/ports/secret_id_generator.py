from __future__ import annotations

from typing import Protocol

from burnlink.contexts.secret_messages.domain.value_objects import SecretId


class SecretIdGenerator(Protocol):
    """
    SecretIdGenerator — source of unguessable public secret identifiers.

    Related:
      - src/burnlink/contexts/secret_messages/application/use_cases/create_secret.py
      - src/burnlink/contexts/secret_messages/adapters/outbound/ids/uuid4_secret_id_generator.py
    """

    def next_id(self) -> SecretId:
        """
        Produce a new identifier with 122 bits of CSPRNG entropy.

        Args:
            None.
        Returns:
            SecretId: Fresh identifier, not derivable from sequence or time.
        Assumptions:
            No persistence lookup is performed; uniqueness is probabilistic.
        Raises:
            None.
        Side Effects:
            Consumes OS CSPRNG randomness.
        """
        ...
