from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import sessionmaker, Session
from contextlib import contextmanager

from campus_crush.core.config import get_settings
from campus_crush.core.logger import get_logger
from campus_crush.db.tables import metadata

settings = get_settings()
logger = get_logger(__name__)

_url = settings.sqlalchemy_url
_is_sqlite = _url.startswith("sqlite")

if _is_sqlite:
    # Background tasks run in the threadpool, so the connection crosses threads
    engine = create_engine(
        _url,
        connect_args={"check_same_thread": False},
        echo=settings.debug
    )

    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
else:
    # Create engine with connection pool
    # pool_size=5: maintain 5 connections ready
    # max_overflow=10: allow 10 extra connections under load
    engine = create_engine(
        _url,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
        echo=settings.debug  # Log SQL queries in debug mode
    )

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@contextmanager
def get_db_session():
    """
    Context manager for database sessions.
    Usage:
        with get_db_session() as db:
            db.execute(select(users))
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_db():
    """
    Dependency for FastAPI route injection.
    Usage:
        @app.get("/users")
        def get_users(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create all tables that don't exist yet."""
    metadata.create_all(bind=engine)
    logger.info("Database tables ready")


def test_database_connection() -> bool:
    """
    Test if the database is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        with get_db_session() as db:
            result = db.execute(text("SELECT 1 as test"))
            row = result.fetchone()
            return row[0] == 1
    except Exception as e:
        logger.error("Database connection failed: %s", e)
        return False


def fetch_one(db: Session, statement) -> dict:
    """Execute a statement and return the first row as a dict (or None)."""
    row = db.execute(statement).mappings().first()
    return dict(row) if row else None


def fetch_all(db: Session, statement) -> list:
    """Execute a statement and return all rows as a list of dicts."""
    return [dict(row) for row in db.execute(statement).mappings().all()]
