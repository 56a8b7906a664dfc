"""
Monthly invoice scheduler.

Runs inside the API process. Every 30 seconds it checks whether the
configured run time (day 1, 02:00 by default) has come for the current
month and, if so, generates that month's invoices once.
"""
import asyncio
import logging
from typing import Optional, Tuple

from ..core.clock import Clock, system_clock
from ..core.config import settings
from .billing_rules import BatchResult

logger = logging.getLogger(__name__)


class MonthlyInvoiceScheduler:
    """Polls the clock and triggers monthly invoice generation."""

    POLL_SECONDS = 30

    def __init__(
        self,
        database=None,
        clock: Clock = None,
        run_day: int = None,
        run_hour: int = None,
        run_minute: int = None,
    ):
        self.running = True
        self._database = database
        self.clock = clock or system_clock
        self.run_day = settings.INVOICE_RUN_DAY if run_day is None else run_day
        self.run_hour = settings.INVOICE_RUN_HOUR if run_hour is None else run_hour
        self.run_minute = settings.INVOICE_RUN_MINUTE if run_minute is None else run_minute
        self._last_run: Optional[Tuple[int, int]] = None  # (year, month)

    @property
    def database(self):
        if self._database is None:
            from ..database.connection import db
            self._database = db
        return self._database

    async def run(self):
        """Main scheduler loop."""
        logger.info(
            f"Monthly invoice scheduler started (day {self.run_day} "
            f"at {self.run_hour:02d}:{self.run_minute:02d})"
        )

        while self.running:
            try:
                await self.check_and_run()
            except Exception as e:
                logger.error(f"Scheduler error: {e}")

            await asyncio.sleep(self.POLL_SECONDS)

    def is_due(self) -> bool:
        """True once the run time of this month has passed and the month is not yet done."""
        now = self.clock.now()
        if self._last_run == (now.year, now.month):
            return False
        if now.day != self.run_day:
            return False
        return (now.hour, now.minute) >= (self.run_hour, self.run_minute)

    async def check_and_run(self) -> Optional[BatchResult]:
        if not self.is_due():
            return None

        now = self.clock.now()
        logger.info(f"Running scheduled invoice generation for {now.year}-{now.month:02d}")
        result = await asyncio.to_thread(self.run_once, now.month, now.year)
        self._last_run = (now.year, now.month)
        logger.info(
            f"Scheduled invoice generation done: created={result.created} "
            f"skipped={result.skipped} failed={result.failed}"
        )
        return result

    def run_once(self, month: int, year: int) -> BatchResult:
        """Generate invoices for one month in a fresh session."""
        from .invoice import InvoiceService
        from .settings import SettingsService

        session = self.database.get_session_direct()
        try:
            stored = SettingsService(session).get_settings()
            billing_day = stored.default_billing_day if stored else 1
            return InvoiceService(session, clock=self.clock).generate_monthly_invoices(
                month, year, default_billing_day=billing_day
            )
        finally:
            session.close()

    def stop(self):
        self.running = False


# Global instance
scheduler = MonthlyInvoiceScheduler()
