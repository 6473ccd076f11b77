from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context  # type: ignore[attr-defined]
from homestay.config import DATABASE_URL
from homestay.models.base import Base
from homestay.models.bookings import Booking  # noqa: F401
from homestay.models.kyc import KycDocument, KycVerification  # noqa: F401
from homestay.models.listings import Listing  # noqa: F401
from homestay.models.messages import Conversation, Message  # noqa: F401
from homestay.models.notifications import Notification, PushToken  # noqa: F401
from homestay.models.reviews import Review  # noqa: F401
from homestay.models.tax import TaxInfo  # noqa: F401
from homestay.models.users import User  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata
config.set_main_option("sqlalchemy.url", DATABASE_URL)


def run_migrations_offline() -> None:
    """Emit the migration SQL for review instead of running it (alembic upgrade --sql)."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode against a live connection."""
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
            compare_type=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
