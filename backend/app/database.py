from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from .config import settings


def configure_sqlite(engine) -> None:
    """
    Foreign keys on, and every transaction opened with BEGIN IMMEDIATE.

    pysqlite defers BEGIN until the first write, so an admission check
    would read outside the transaction that later inserts. Taking the
    write lock up front makes check-then-write one unit per request.
    """

    @event.listens_for(engine, "connect")
    def on_connect(dbapi_connection, _):
        # Let SQLAlchemy emit BEGIN itself (see on_begin)
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


# check_same_thread=False: FastAPI serves sync endpoints from a thread pool
engine = create_engine(
    settings.resolved_database_url,
    connect_args={"check_same_thread": False}
)
configure_sqlite(engine)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)

# Dependency for FastAPI
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
