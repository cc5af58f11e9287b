import logging
from typing import Callable, TypeVar

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.orm.exc import StaleDataError

from backend.app.config import get_settings
from backend.app.exceptions import BudgetOperationError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DATABASE_URL = get_settings().database_url

# Create SQLAlchemy engine
engine = create_engine(
    DATABASE_URL, connect_args={"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
)

# Create sessionmaker
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create tables in the database
def create_tables():
    from backend.app.models.models import Base
    Base.metadata.create_all(bind=engine)

# Dependency to get the database session
def get_db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def run_atomic(db: Session, work: Callable[[], T], *, action: str) -> T:
    """Run ``work`` and commit it as a single transaction.

    A lost optimistic-lock race (stale budget version, or two writers creating
    the same period) rolls back and runs ``work`` again from scratch, up to
    ``reconcile_max_retries`` times. Any other database failure is rolled back
    and reported as ``BudgetOperationError``; domain errors propagate as-is.
    """
    retries = get_settings().reconcile_max_retries
    attempt = 0
    while True:
        try:
            result = work()
            db.commit()
            return result
        except (StaleDataError, IntegrityError) as exc:
            db.rollback()
            if attempt >= retries:
                logger.error("%s: giving up after %d conflicting writes", action, attempt + 1)
                raise BudgetOperationError(f"{action} failed: concurrent update, please retry") from exc
            attempt += 1
            logger.warning("%s: write conflict, retrying (%d/%d)", action, attempt, retries)
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("%s failed", action)
            raise BudgetOperationError(f"{action} failed: {exc}") from exc
        except Exception:
            db.rollback()
            raise
