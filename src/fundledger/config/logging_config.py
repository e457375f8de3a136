"""
Logging setup for the ledger service.

Log timestamps are written in the market timezone so a settlement run's
output lines up with the NAV dates it settles against.
"""

import logging
import sys
from datetime import datetime
from typing import Optional

from fundledger.config.settings import get_settings
from fundledger.core.timezone import market_tz

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Loggers that are chatty at INFO and only matter when something breaks
_QUIET_LOGGERS = ("sqlalchemy.engine", "apscheduler")


class MarketTimeFormatter(logging.Formatter):
    """Formatter that renders %(asctime)s in the market timezone."""

    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:
        stamp = datetime.fromtimestamp(record.created, market_tz())
        if datefmt:
            return stamp.strftime(datefmt)
        return stamp.isoformat(timespec="milliseconds")


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the root logger for the API process and the settlement job."""
    level_name = (level or get_settings().log_level).upper()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(MarketTimeFormatter(LOG_FORMAT))
    logging.basicConfig(
        level=getattr(logging, level_name),
        handlers=[handler],
    )

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(logging.INFO)
