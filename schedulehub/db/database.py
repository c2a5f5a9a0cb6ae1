from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from schedulehub.core.config import settings


class Base(DeclarativeBase):
    pass


def create_db_engine(db_url: str = settings.DATABASE_URL, echo: bool = settings.SQL_ECHO, **engine_kwargs) -> Engine:
    """Create SQLAlchemy engine. SQLite connections get foreign keys switched on."""
    connect_args = {"check_same_thread": False} if db_url.startswith("sqlite") else {}
    engine = create_engine(db_url, echo=echo, connect_args=connect_args, **engine_kwargs)

    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)

    return engine


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def init_database(bind: Engine) -> None:
    """Create all tables (and the shift overlap guard) on the given engine."""
    # models must be imported so every table is registered on Base.metadata
    import schedulehub.db.models  # noqa: F401

    Base.metadata.create_all(bind)


engine = create_db_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
