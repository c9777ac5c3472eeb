"""Migrations application package."""

from apps.migrations.main import to_sqlalchemy_psycopg_url

__all__ = [
    "to_sqlalchemy_psycopg_url",
]
