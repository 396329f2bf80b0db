# schemas/reminder.py
from datetime import datetime
from typing import Optional

from pydantic import Field

from models.reminder import ReminderType, ReminderMethod, ReminderFrequency, ReminderStatus
from .base import CamelModel, LocalDatetime


class ReminderCreate(CamelModel):
     title: str = Field(..., min_length=1, max_length=255)
     type: ReminderType
     method: ReminderMethod
     frequency: ReminderFrequency
     due_date: LocalDatetime
     description: Optional[str] = None


class ReminderResponse(CamelModel):
     id: int
     title: str
     type: ReminderType
     method: ReminderMethod
     frequency: ReminderFrequency
     due_date: datetime
     description: Optional[str] = None
     status: ReminderStatus
     sent_at: Optional[datetime] = None
     created_at: datetime
