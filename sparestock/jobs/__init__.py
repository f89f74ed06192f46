# Jobs Package - Scheduled background tasks
from .ledger_check import LedgerCheckScheduler, start_scheduler, stop_scheduler

__all__ = ["LedgerCheckScheduler", "start_scheduler", "stop_scheduler"]
