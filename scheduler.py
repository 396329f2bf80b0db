# scheduler.py
"""
Background job wiring (APScheduler).

The reminder pass runs on an interval in a worker thread. max_instances=1
and coalesce=True stop APScheduler from stacking runs; ReminderScheduler's
own lock covers any overlap that still slips through.
"""
import logging
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

import config
from database import get_session_context
from services.reminder_service import ReminderScheduler
from services.settings_service import settings_provider

logger = logging.getLogger(__name__)

reminder_scheduler = ReminderScheduler(get_session_context, settings_provider)

_scheduler: Optional[BackgroundScheduler] = None


def start_scheduler() -> Optional[BackgroundScheduler]:
     global _scheduler
     if not config.REMINDER_SCHEDULER_ENABLED:
          logger.info("Reminder scheduler disabled")
          return None
     if _scheduler is not None and _scheduler.running:
          return _scheduler

     _scheduler = BackgroundScheduler()
     _scheduler.add_job(
          reminder_scheduler.tick,
          trigger=IntervalTrigger(seconds=config.REMINDER_INTERVAL_SECONDS),
          id="reminder_pass",
          name="Send due reminders",
          max_instances=1,
          coalesce=True,
          replace_existing=True,
     )
     _scheduler.start()
     logger.info("Reminder scheduler started (every %ss)", config.REMINDER_INTERVAL_SECONDS)
     return _scheduler


def shutdown_scheduler() -> None:
     global _scheduler
     if _scheduler is not None and _scheduler.running:
          _scheduler.shutdown(wait=False)
          logger.info("Reminder scheduler stopped")
     _scheduler = None
