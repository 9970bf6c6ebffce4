import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class StoreError(RuntimeError):
    """A read or write against the relational store failed."""


class SyncAbortedError(RuntimeError):
    """The tally was reset but could not be rebuilt; standings are left empty."""


class SyncInProgressError(RuntimeError):
    """Another medal tally sync is still running."""


@contextmanager
def store_errors(db: Session, operation: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("Store operation %r failed", operation, exc_info=True)
        db.rollback()
        raise StoreError(f"Could not {operation}.") from exc
