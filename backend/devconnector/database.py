"""
Store client: engine, per-request sessions and schema bootstrap.

Services never import a session themselves; routes get one from `get_db` and pass it
down, so tests can bind everything to their own engine.
"""
import logging

from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import DATABASE_URL

logger = logging.getLogger(__name__)


def _normalize_database_url(url: str) -> str:
    # Allow simpler `.env` values like `mysql://...` and upgrade to the driver form.
    return url.replace("mysql://", "mysql+pymysql://", 1) if url.startswith("mysql://") else url


def _sqlite_connect(dbapi_connection, connection_record):  # noqa: ANN001
    try:
        cursor = dbapi_connection.cursor()
        # FK enforcement is off by default in SQLite; cascades below rely on it.
        cursor.execute("PRAGMA foreign_keys=ON;")
        cursor.execute("PRAGMA journal_mode=WAL;")
        cursor.execute("PRAGMA busy_timeout=30000;")
        cursor.close()
    except Exception as e:
        logger.warning("Failed to set SQLite pragmas: %s", e)


def enable_sqlite_pragmas(target_engine) -> None:  # noqa: ANN001
    event.listen(target_engine, "connect", _sqlite_connect)


def make_engine(url: str):
    url = _normalize_database_url((url or "").strip())
    kwargs = {"pool_pre_ping": True}
    if url.startswith("sqlite"):
        # Shared across uvicorn worker threads.
        kwargs["connect_args"] = {"check_same_thread": False, "timeout": 30}
    new_engine = create_engine(url, **kwargs)
    if url.startswith("sqlite"):
        enable_sqlite_pragmas(new_engine)
    return new_engine


engine = make_engine(DATABASE_URL)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    # Import models so they register with SQLAlchemy metadata before create_all.
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Schema ready on %s", engine.url.render_as_string(hide_password=True))
