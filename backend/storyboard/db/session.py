from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool


def make_engine(database_uri: str) -> Engine:
    """Build the engine for a database URL.

    SQLite gets cross-thread access and enforced foreign keys so cascades
    behave as they do on PostgreSQL. In-memory SQLite shares one connection.
    """
    if not database_uri.startswith("sqlite"):
        return create_engine(database_uri, pool_pre_ping=True)

    kwargs = {"connect_args": {"check_same_thread": False}}
    if database_uri in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool

    engine = create_engine(database_uri, **kwargs)

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autoflush=False, bind=engine)
