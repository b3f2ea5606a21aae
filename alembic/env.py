"""Migrations for the GymTracker schema.

The URL comes from gymtracker settings (DATABASE_* or DATABASE_URL_OVERRIDE),
converted to its synchronous driver. SQLite gets batch mode so ALTERs work.
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from gymtracker.core.config import get_settings
from gymtracker.db.base import Base
from gymtracker.models import *  # noqa: F401, F403 - populate Base.metadata

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

settings = get_settings()
config.set_main_option("sqlalchemy.url", settings.database_url)

target_metadata = Base.metadata


def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=target_metadata,
        render_as_batch=settings.is_sqlite,
        compare_type=True,
        **kwargs,
    )


def run_migrations_offline() -> None:
    """Emit SQL for the configured database without connecting."""
    _configure(url=settings.database_url, literal_binds=True, dialect_opts={"paramstyle": "named"})
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = create_engine(settings.database_url, poolclass=pool.NullPool)
    try:
        with engine.connect() as connection:
            _configure(connection=connection)
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
