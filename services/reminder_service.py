# services/reminder_service.py
"""
Reminder Service - fans due reminders out to tenants.

A reminder is one-shot: once its due date has passed it is sent in the next
pass and marked 'sent'. Rent reminders (rent_due, overdue) skip tenants that
have already paid this month; every other type goes to all active tenants.
"""
import logging
import threading
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy import desc
from sqlalchemy.orm import Session

from models import Reminder, ReminderStatus, Tenant, TenantStatus
from models.reminder import PAYMENT_REMINDER_TYPES
from schemas.reminder import ReminderCreate
from schemas.settings import SettingsSnapshot
from services.notification_service import Notifier
from services.payment_service import has_paid_since, start_of_month
from utils.email_templates import reminder_email, reminder_text

logger = logging.getLogger(__name__)


def create_reminder(db: Session, data: ReminderCreate) -> Reminder:
     reminder = Reminder(
          title=data.title,
          type=data.type,
          method=data.method,
          frequency=data.frequency,
          due_date=data.due_date,
          description=data.description,
          status=ReminderStatus.PENDING,
     )
     db.add(reminder)
     db.commit()
     db.refresh(reminder)
     return reminder


def list_reminders(db: Session) -> List[Reminder]:
     return db.query(Reminder).order_by(desc(Reminder.created_at), desc(Reminder.id)).all()


def due_reminders(db: Session, now: datetime) -> List[Reminder]:
     return (
          db.query(Reminder)
          .filter(Reminder.status == ReminderStatus.PENDING, Reminder.due_date <= now)
          .order_by(Reminder.due_date)
          .all()
     )


def recipients_for(db: Session, reminder: Reminder, now: datetime) -> List[Tenant]:
     tenants = db.query(Tenant).filter(Tenant.status == TenantStatus.ACTIVE).all()
     if reminder.type not in PAYMENT_REMINDER_TYPES:
          return tenants
     month_start = start_of_month(now)
     return [t for t in tenants if not has_paid_since(db, t.id, month_start)]


def _notify_tenant(notifier: Notifier, settings: SettingsSnapshot, reminder: Reminder, tenant: Tenant) -> None:
     toggles = settings.notifications
     org_name = settings.org_name
     if toggles.email is not False:
          notifier.send_email(
               tenant.email,
               reminder.title,
               reminder_email(tenant.name, reminder.title, reminder.description, reminder.due_date, org_name),
          )
     text = reminder_text(tenant.name, reminder.title, reminder.description, org_name)
     if toggles.sms and tenant.phone:
          notifier.send_sms(tenant.phone, text)
     if toggles.whatsapp and tenant.phone:
          notifier.send_whatsapp(tenant.phone, text)


def run_reminder_pass(
     db: Session,
     settings: SettingsSnapshot,
     notifier: Optional[Notifier] = None,
     now: Optional[datetime] = None,
) -> int:
     """
     Send every due pending reminder once and mark it sent.

     A failure for one tenant is logged and the fan-out continues.
     Returns the number of reminders processed.
     """
     now = now or datetime.now()
     notifier = notifier or Notifier(settings)
     reminders = due_reminders(db, now)
     for reminder in reminders:
          tenants = recipients_for(db, reminder, now)
          logger.info("Sending reminder %s '%s' to %d tenant(s)", reminder.id, reminder.title, len(tenants))
          for tenant in tenants:
               try:
                    _notify_tenant(notifier, settings, reminder, tenant)
               except Exception:
                    logger.exception("Reminder %s failed for tenant %s", reminder.id, tenant.id)
          reminder.mark_as_sent(now)
          db.commit()
     return len(reminders)


class ReminderScheduler:
     """
     Single-flight wrapper around run_reminder_pass.

     tick() is called by the background scheduler. If the previous pass is
     still running the tick is skipped rather than queued.
     """

     def __init__(self, session_factory: Callable, settings_provider, clock: Callable[[], datetime] = datetime.now):
          self._session_factory = session_factory
          self._settings_provider = settings_provider
          self._clock = clock
          self._lock = threading.Lock()

     @property
     def running(self) -> bool:
          return self._lock.locked()

     def tick(self) -> Optional[int]:
          if not self._lock.acquire(blocking=False):
               logger.warning("Reminder pass still running; skipping this tick")
               return None
          try:
               with self._session_factory() as db:
                    settings = self._settings_provider.get(db)
                    return run_reminder_pass(db, settings, now=self._clock())
          except Exception:
               logger.exception("Reminder pass failed")
               return None
          finally:
               self._lock.release()
