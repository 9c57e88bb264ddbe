import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from homeboard.errors import TransactionFailure

logger = logging.getLogger(__name__)


@contextmanager
def session_transaction(session: Session, *, operation: str) -> Iterator[Session]:
    """Commit everything done inside the block, or roll all of it back.

    Storage errors surface as TransactionFailure; domain errors raised inside the
    block are re-raised unchanged after the rollback.
    """
    try:
        yield session
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.warning("Transaction rolled back | operation=%s error=%s", operation, exc.__class__.__name__)
        raise TransactionFailure(f"{operation} failed and was rolled back") from exc
    except Exception:
        session.rollback()
        raise
