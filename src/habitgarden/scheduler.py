"""Background scheduler running the per-minute reminder sweep."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from .logging_config import get_logger
from .services.reminders import DispatchReport, dispatch_reminders

if TYPE_CHECKING:
    from .context import AppContext

logger = get_logger(__name__)

REMINDER_JOB_ID = "habit_reminders"


class ReminderScheduler:
    """Owns the APScheduler instance that fires reminders every minute."""

    def __init__(self, ctx: AppContext):
        """Initialize the scheduler with app context.

        Args:
            ctx: Application context with repositories, sender and config
        """
        self.ctx = ctx
        self.scheduler: Optional[BackgroundScheduler] = None

    @property
    def running(self) -> bool:
        return self.scheduler is not None

    def start(self) -> None:
        """Start the background scheduler."""
        if self.scheduler is not None:
            logger.warning("Scheduler already running")
            return

        zone = self.ctx.config.reminder_zone()
        self.scheduler = BackgroundScheduler(timezone=zone)
        self.scheduler.add_job(
            func=self.run_reminders,
            trigger=CronTrigger(minute="*", timezone=zone),
            id=REMINDER_JOB_ID,
            name="Habit reminder sweep",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self.scheduler.start()
        logger.info("Scheduled reminder sweep every minute (%s)", zone.key)

    def stop(self) -> None:
        """Stop the background scheduler gracefully."""
        if self.scheduler is not None:
            self.scheduler.shutdown(wait=True)
            self.scheduler = None
            logger.info("Background scheduler stopped")

    def run_reminders(self, now: Optional[datetime] = None) -> Optional[DispatchReport]:
        """Execute one sweep; errors are logged so the next minute still runs."""
        try:
            return dispatch_reminders(
                habit_repo=self.ctx.habit_repo,
                token_repo=self.ctx.token_repo,
                sender=self.ctx.push_sender,
                now=now or datetime.now(timezone.utc),
                zone=self.ctx.config.reminder_zone(),
            )
        except Exception as exc:
            logger.error(f"Reminder sweep failed: {exc}", exc_info=True)
            return None


def create_scheduler(ctx: AppContext, *, auto_start: bool = False) -> ReminderScheduler:
    """Create and optionally start a reminder scheduler.

    Args:
        ctx: Application context
        auto_start: Whether to start the scheduler immediately

    Returns:
        ReminderScheduler instance
    """
    scheduler = ReminderScheduler(ctx)
    if auto_start:
        scheduler.start()
    return scheduler


__all__ = ["REMINDER_JOB_ID", "ReminderScheduler", "create_scheduler"]
