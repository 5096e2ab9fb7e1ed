import logging
from sqlalchemy import event
from sqlmodel import Session, SQLModel, create_engine

from registry.config import DATABASE_URL, SQL_ECHO

logger = logging.getLogger(__name__)

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    DATABASE_URL,
    connect_args=connect_args,
    pool_pre_ping=True,

    echo=SQL_ECHO # Set SQL_ECHO=true for SQL query logging
)


def enable_sqlite_foreign_keys(target_engine):
    # SQLite ignores ON DELETE CASCADE unless the pragma is on for every connection
    if target_engine.dialect.name != "sqlite":
        return

    @event.listens_for(target_engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


enable_sqlite_foreign_keys(engine)


def create_db_and_tables(target_engine=None):
    # Import models so their tables are registered on the metadata
    from registry.models import item, message, user  # noqa: F401

    SQLModel.metadata.create_all(target_engine or engine)
    logger.info("Database tables ready")


def get_session():
    with Session(engine) as session:
        yield session
