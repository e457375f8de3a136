"""Scheduled settlement run."""

import logging

from fundledger.domain.views import SettlementResult
from fundledger.repositories.sqlalchemy import (
    SqlAlchemyNavRepository,
    SqlAlchemyPositionRepository,
    SqlAlchemyTransactionRepository,
    SqlAlchemyUnitOfWork,
    get_session,
)
from fundledger.services.event_queue import get_event_queue
from fundledger.services.settlement_engine import SettlementEngine

logger = logging.getLogger(__name__)


def run_settlement_job() -> SettlementResult:
    """Open a session, run one settlement pass and close the session."""
    logger.info("Scheduled settlement starting")
    db = get_session()
    try:
        engine = SettlementEngine(
            transaction_repo=SqlAlchemyTransactionRepository(db),
            position_repo=SqlAlchemyPositionRepository(db),
            nav_repo=SqlAlchemyNavRepository(db),
            uow=SqlAlchemyUnitOfWork(db),
            event_publisher=get_event_queue(),
        )
        result = engine.run_settlement()
    finally:
        db.close()

    for reason in result.skipped_reasons:
        logger.info("Settlement skip: %s", reason)
    return result
