# models/reminder.py
import enum

from sqlalchemy import Column, Integer, String, Text, DateTime, Enum, func
from .base import Base


class ReminderType(str, enum.Enum):
     RENT_DUE = "rent_due"
     OVERDUE = "overdue"
     MAINTENANCE = "maintenance"
     INSPECTION = "inspection"


# Reminder types only sent to tenants who have not paid this month
PAYMENT_REMINDER_TYPES = (ReminderType.RENT_DUE, ReminderType.OVERDUE)


class ReminderMethod(str, enum.Enum):
     EMAIL = "email"
     SMS = "sms"


class ReminderFrequency(str, enum.Enum):
     IMMEDIATE = "immediate"
     ONE_DAY = "1day"
     THREE_DAYS = "3days"
     ONE_WEEK = "1week"


class ReminderStatus(str, enum.Enum):
     PENDING = "pending"
     SENT = "sent"
     OVERDUE = "overdue"


class Reminder(Base):
     """
     Reminder model - a scheduled notification intent.

     Created by a user, picked up once by the reminder scheduler when due and
     marked 'sent'. It is never re-armed; the next cycle needs a new reminder.
     """
     __tablename__ = "reminders"

     id = Column(Integer, primary_key=True, autoincrement=True)
     title = Column(String(255), nullable=False)
     type = Column(
          Enum(ReminderType, name="reminder_type", values_callable=lambda e: [m.value for m in e]),
          nullable=False,
     )
     method = Column(
          Enum(ReminderMethod, name="reminder_method", values_callable=lambda e: [m.value for m in e]),
          nullable=False,
     )
     frequency = Column(
          Enum(ReminderFrequency, name="reminder_frequency", values_callable=lambda e: [m.value for m in e]),
          nullable=False,
     )
     due_date = Column(DateTime, nullable=False, index=True)
     description = Column(Text, nullable=True)
     status = Column(
          Enum(ReminderStatus, name="reminder_status", values_callable=lambda e: [m.value for m in e]),
          default=ReminderStatus.PENDING,
          nullable=False,
          index=True,
     )
     sent_at = Column(DateTime, nullable=True)

     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     def __repr__(self):
          return f"<Reminder(id={self.id}, type='{self.type.value}', status='{self.status.value}')>"

     def mark_as_sent(self, when) -> None:
          self.status = ReminderStatus.SENT
          self.sent_at = when
