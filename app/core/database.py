import logging
import time

from sqlalchemy import create_engine, event, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from app.core.config import settings

logger = logging.getLogger(__name__)

engine_kwargs = {"echo": False}

if settings.DATABASE_URL.startswith("postgresql"):
    engine_kwargs.update({
        "pool_size": 10,
        "max_overflow": 20,
        "pool_pre_ping": True,
    })
elif settings.DATABASE_URL.startswith("sqlite"):
    engine_kwargs["connect_args"] = {"check_same_thread": False}

engine = create_engine(settings.DATABASE_URL, **engine_kwargs)


def enable_sqlite_foreign_keys(target_engine):
    @event.listens_for(target_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


if settings.DATABASE_URL.startswith("sqlite"):
    enable_sqlite_foreign_keys(engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    pass


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def wait_for_database(retries: int = None, base_delay: float = None, sleep=time.sleep) -> None:
    """
    Block until the database accepts connections.

    Retries with exponential backoff (base_delay * 2 ** (attempt - 1)) and
    re-raises the last OperationalError once the retries are exhausted.
    """
    retries = retries if retries is not None else settings.DB_CONNECT_RETRIES
    base_delay = base_delay if base_delay is not None else settings.DB_CONNECT_BASE_DELAY

    last_error = None
    for attempt in range(1, retries + 1):
        try:
            logger.info(f"Attempting database connection ({attempt}/{retries})")
            with engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            logger.info("Database connected")
            return
        except OperationalError as e:
            last_error = e
            logger.error(f"Database connection attempt {attempt} failed: {e}")
            if attempt < retries:
                delay = base_delay * 2 ** (attempt - 1)
                logger.info(f"Retrying database connection in {delay}s")
                sleep(delay)

    raise last_error
