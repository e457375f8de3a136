"""Background jobs."""

from fundledger.jobs.scheduler import (
    init_scheduler,
    get_scheduler,
    register_settlement_job,
    start_scheduler,
    shutdown_scheduler,
)
from fundledger.jobs.settlement_job import run_settlement_job

__all__ = [
    "init_scheduler",
    "get_scheduler",
    "register_settlement_job",
    "start_scheduler",
    "shutdown_scheduler",
    "run_settlement_job",
]
