"""
Ledger Check Scheduler - periodic stock ledger verification
"""
import asyncio
import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from sparestock.core.config import settings
from sparestock.core.database import SessionLocal
from sparestock.services.ledger_service import LedgerService

logger = logging.getLogger(__name__)

# Global scheduler instance
_scheduler = None


class LedgerCheckScheduler:
    """
    Runs the ledger drift check on a fixed interval
    """

    def __init__(self, interval_minutes: int = None):
        self.scheduler = AsyncIOScheduler()
        self.interval_minutes = interval_minutes or settings.LEDGER_CHECK_INTERVAL_MINUTES
        self.is_running = False

    def start(self):
        """Start the scheduler"""
        if not self.is_running:
            self.scheduler.add_job(
                func=self._run_check,
                trigger=IntervalTrigger(minutes=self.interval_minutes),
                id="ledger_check",
                name="Stock ledger check",
                replace_existing=True,
                max_instances=1,  # Prevent overlapping checks
            )
            self.scheduler.start()
            self.is_running = True
            logger.info(f"Ledger check scheduler started: every {self.interval_minutes} minutes")

    def stop(self):
        """Stop the scheduler"""
        if self.is_running:
            self.scheduler.shutdown(wait=False)
            self.is_running = False
            logger.info("Ledger check scheduler stopped")

    def _run_check(self):
        """Execute one drift check"""
        db = SessionLocal()
        try:
            drift = LedgerService.find_drift(db)
            if not drift:
                logger.info("Scheduled ledger check: no drift")
            return drift

        except Exception as e:
            logger.error(f"Scheduled ledger check failed: {e}")

        finally:
            db.close()

    def trigger_check_now(self):
        """Queue an immediate check"""
        self.scheduler.add_job(
            func=self._run_check,
            trigger="date",
            id="ledger_check_immediate",
            replace_existing=True,
        )
        logger.info("Triggered immediate ledger check")


# ========== Global Functions ==========

def get_scheduler() -> "LedgerCheckScheduler":
    """Get or create the global scheduler instance"""
    global _scheduler
    if _scheduler is None:
        _scheduler = LedgerCheckScheduler()
    return _scheduler


def start_scheduler():
    """Start the global scheduler"""
    scheduler = get_scheduler()
    scheduler.start()


def stop_scheduler():
    """Stop the global scheduler"""
    global _scheduler
    if _scheduler:
        _scheduler.stop()
        _scheduler = None


# ========== CLI Commands ==========

if __name__ == "__main__":
    """
    Run scheduler standalone:
    python -m sparestock.jobs.ledger_check
    """
    from sparestock.core.logging_config import setup_logging

    setup_logging(settings.LOG_LEVEL, settings.LOGS_PATH)

    async def _main():
        start_scheduler()
        get_scheduler().trigger_check_now()
        await asyncio.Event().wait()

    print("Starting ledger check scheduler...")
    print("Press Ctrl+C to stop")
    try:
        asyncio.run(_main())
    except KeyboardInterrupt:
        stop_scheduler()
        print("Scheduler stopped")
