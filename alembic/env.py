from logging.config import fileConfig

from sqlalchemy import engine_from_config
from sqlalchemy import pool

from alembic import context

from agency.db.base import Base, normalize_database_url
from agency.core.config import settings

# Import all models so Alembic can discover them
import agency.db.models  # noqa: F401

config = context.config

# Keep the application's loggers alive when migrations run inside the app or tests
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = Base.metadata


# The URL comes from settings unless the caller (e.g. the test suite) set one
config_url = config.get_main_option("sqlalchemy.url")
if not config_url:
    config.set_main_option("sqlalchemy.url", normalize_database_url(settings.database_url))
else:
    config.set_main_option("sqlalchemy.url", normalize_database_url(config_url))


def run_migrations_offline() -> None:
    """Emit the migration SQL without connecting to a database."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
