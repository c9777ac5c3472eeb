"""Create secret messages v1 storage table and expiry index."""

from __future__ import annotations

from alembic import op

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """
    Apply secret messages v1 storage schema.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Rows hold only ciphertext and encryption metadata; plaintext never reaches storage.
    Raises:
        Exception: Postgres execution errors from Alembic runtime.
    Side Effects:
        Creates `secret_messages` table, constraints, and partial expiry index.
    """
    op.execute(
        """
        CREATE TABLE IF NOT EXISTS secret_messages (
            secret_id UUID PRIMARY KEY,
            ciphertext BYTEA NOT NULL,
            nonce BYTEA NOT NULL,
            auth_tag BYTEA NOT NULL,
            destroy_mode TEXT NOT NULL,
            expires_at TIMESTAMPTZ NULL,
            created_at TIMESTAMPTZ NOT NULL,
            CONSTRAINT secret_messages_nonce_length_chk
                CHECK (octet_length(nonce) = 12),
            CONSTRAINT secret_messages_auth_tag_length_chk
                CHECK (octet_length(auth_tag) = 16),
            CONSTRAINT secret_messages_destroy_mode_chk
                CHECK (destroy_mode IN ('on_read', 'on_expiry')),
            CONSTRAINT secret_messages_expiry_pairing_chk
                CHECK (
                    (destroy_mode = 'on_read' AND expires_at IS NULL)
                    OR (destroy_mode = 'on_expiry' AND expires_at IS NOT NULL)
                ),
            CONSTRAINT secret_messages_expires_after_created_chk
                CHECK (expires_at IS NULL OR expires_at > created_at)
        )
        """
    )
    op.execute(
        """
        CREATE INDEX IF NOT EXISTS secret_messages_expires_at_idx
            ON secret_messages (expires_at)
            WHERE destroy_mode = 'on_expiry'
        """
    )


def downgrade() -> None:
    """
    Roll back secret messages v1 storage schema.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Downgrade destroys every stored secret irreversibly.
    Raises:
        Exception: Postgres execution errors from Alembic runtime.
    Side Effects:
        Drops secret messages index and table.
    """
    op.execute("DROP INDEX IF EXISTS secret_messages_expires_at_idx")
    op.execute("DROP TABLE IF EXISTS secret_messages")
