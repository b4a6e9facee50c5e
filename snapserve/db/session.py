import logging
import uuid

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from snapserve.core.config import settings
from snapserve.core.exceptions import StorageError

logger = logging.getLogger(__name__)

# Ensure charset=utf8mb4 is set for full Unicode support on MySQL/MariaDB
database_url = settings.DATABASE_URL
if "mysql" in database_url.lower() and "charset" not in database_url.lower():
    separator = "&" if "?" in database_url else "?"
    database_url = f"{database_url}{separator}charset=utf8mb4"

engine_options = {"pool_pre_ping": True, "echo": False}
if database_url.startswith("sqlite"):
    # SQLite connections are used from the request thread pool
    engine_options["connect_args"] = {"check_same_thread": False}
else:
    # pool_recycle: recycle connections after 1 hour (prevents MySQL timeouts)
    engine_options.update(
        pool_size=20,
        max_overflow=10,
        pool_recycle=3600,
        pool_timeout=30,
    )

engine = create_engine(database_url, **engine_options)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


# Dependency for FastAPI
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def commit_or_raise(db: Session) -> None:
    """
    Commit the session, rolling back on failure.

    IntegrityError is re-raised untouched so callers can map constraint
    violations to domain errors; anything else becomes a StorageError.
    """
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        correlation_id = uuid.uuid4().hex
        logger.exception("Database commit failed [%s]", correlation_id)
        raise StorageError(correlation_id=correlation_id) from exc
