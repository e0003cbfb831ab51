"""Alembic environment configuration - SYNC MODE for migrations."""

from logging.config import fileConfig
import os
from pathlib import Path

# Load .env FIRST before anything else
from dotenv import load_dotenv
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

from sqlalchemy import pool, create_engine

from alembic import context

from leasing.core.database import Base
import leasing.models  # noqa: F401  (registers tables on Base.metadata)

# Alembic Config object
config = context.config

# Interpret the config file for Python logging
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


ASYNC_DRIVERS = {"+asyncpg": "", "+aiosqlite": ""}


def get_url() -> str:
    """DATABASE_URL with the async driver swapped for its sync default."""
    url = os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set; migrations need a target database")
    for driver, replacement in ASYNC_DRIVERS.items():
        url = url.replace(driver, replacement)
    return url


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode with SYNC engine."""
    connectable = create_engine(
        get_url(),
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
