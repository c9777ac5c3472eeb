from __future__ import annotations

from sqlalchemy import engine_from_config, pool
from sqlalchemy.engine import Connection

from alembic import context

config = context.config

# Schema is defined by raw SQL revisions; autogenerate is not used.
target_metadata = None


def run_migrations_offline() -> None:
    """
    Emit migration SQL without a database connection (`alembic upgrade --sql`).

    Related:
      - alembic/versions/20261019_0001_secret_messages_v1.py
      - apps/migrations/main.py
    """
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """
    Run migrations on the connection injected by `apps.migrations.main` or a fresh one.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Injected connection already holds the migration advisory lock.
    Raises:
        Exception: Alembic configuration/runtime errors.
    Side Effects:
        Opens DB connection (when not injected) and applies schema changes.
    """
    injected = config.attributes.get("connection")
    if isinstance(injected, Connection):
        context.configure(connection=injected, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()
        return

    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
