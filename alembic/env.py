from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from app import app as flask_app
from configs import db
from db.models import *  # noqa: F401,F403  registers every table

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# same URL the web app uses (DATABASE_URL or the local sqlite file)
db_url = flask_app.config["SQLALCHEMY_DATABASE_URI"]
config.set_main_option("sqlalchemy.url", db_url)

target_metadata = db.metadata


def _configure_kwargs():
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "render_as_batch": db_url.startswith("sqlite"),
    }


def run_migrations_offline() -> None:
    context.configure(
        url=db_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_kwargs(),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with engine.connect() as connection:
        context.configure(connection=connection, **_configure_kwargs())
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
