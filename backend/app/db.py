# backend/app/db.py

from pathlib import Path

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from app.core.settings import settings

BACKEND_DIR = Path(__file__).resolve().parents[1]


def _resolve_sqlite_path(raw_url: str) -> tuple[str, str | None]:
    """
    Pin a relative SQLite file to backend/ so the app, the tests, alembic and
    scripts/reset_db.py all open the same database whatever the working directory.
    In-memory databases and other drivers pass through untouched.
    """
    url = make_url(raw_url)
    if not url.drivername.startswith("sqlite") or url.database in (None, "", ":memory:"):
        return raw_url, None

    path = Path(url.database)
    if not path.is_absolute():
        path = (BACKEND_DIR / path).resolve()
    url = url.set(database=str(path))
    return url.render_as_string(hide_password=False), str(path)


DB_URL, SQLITE_PATH = _resolve_sqlite_path(settings.db_url)
IS_SQLITE = DB_URL.startswith("sqlite")

engine = create_engine(
    DB_URL,
    future=True,
    connect_args={"check_same_thread": False} if IS_SQLITE else {},
    pool_pre_ping=not IS_SQLITE,
)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
Base = declarative_base()


if IS_SQLITE:

    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        # ON DELETE CASCADE on project children is a no-op without this pragma
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_db_path() -> str | None:
    return SQLITE_PATH


def check_connection(db) -> str | None:
    """Round-trip to the database; returns the error text, or None when it answers."""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        return str(exc)
    return None
