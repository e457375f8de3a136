"""SQLAlchemy unit of work."""

import logging

from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class SqlAlchemyUnitOfWork:
    """
    Commit/rollback boundary over a session.

    Re-entrant use is not supported; each `with` block is one database
    transaction.
    """

    def __init__(self, db: Session):
        self._db = db

    def __enter__(self) -> "SqlAlchemyUnitOfWork":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            try:
                self._db.commit()
            except Exception:
                self._db.rollback()
                raise
        else:
            logger.debug("Rolling back unit of work after %s", exc_type.__name__)
            self._db.rollback()
        return False
