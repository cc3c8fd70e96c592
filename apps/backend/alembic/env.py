from __future__ import annotations

from logging.config import fileConfig

from alembic import context

from fleetledger import models  # noqa: F401 - registers the tables on Base.metadata
from fleetledger.core.config import settings
from fleetledger.core.database import Base, is_sqlite, make_engine


config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

# FLEETLEDGER_DATABASE_URL wins over alembic.ini
config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

target_metadata = Base.metadata


def _configure_kwargs(url: str) -> dict:
    # SQLite cannot ALTER most columns in place
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "render_as_batch": is_sqlite(url),
    }


def run_migrations_offline():
    url = settings.DATABASE_URL
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_kwargs(url),
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    connectable = make_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)
    try:
        with connectable.connect() as connection:
            context.configure(connection=connection, **_configure_kwargs(settings.DATABASE_URL))
            with context.begin_transaction():
                context.run_migrations()
    finally:
        connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
