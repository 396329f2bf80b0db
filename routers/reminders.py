# routers/reminders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_current_user
from models import Reminder, User
from schemas.base import MessageResponse
from schemas.reminder import ReminderCreate, ReminderResponse
from services.activity_service import log_activity
from services.reminder_service import create_reminder, list_reminders

router = APIRouter(prefix="/api/reminders", tags=["reminders"])


@router.get("", response_model=List[ReminderResponse])
def get_reminders(db: Session = Depends(get_session), user: User = Depends(get_current_user)):
     return list_reminders(db)


@router.post("", response_model=ReminderResponse, status_code=status.HTTP_201_CREATED)
def post_reminder(
     body: ReminderCreate,
     db: Session = Depends(get_session),
     user: User = Depends(get_current_user),
):
     reminder = create_reminder(db, body)
     log_activity(db, user, "Create Reminder", f"Scheduled reminder '{reminder.title}'", "reminder")
     return reminder


@router.delete("/{reminder_id}", response_model=MessageResponse)
def delete_reminder(
     reminder_id: int,
     db: Session = Depends(get_session),
     user: User = Depends(get_current_user),
):
     reminder = db.get(Reminder, reminder_id)
     if not reminder:
          raise HTTPException(404, "Reminder not found")
     db.delete(reminder)
     db.commit()
     return {"message": "Reminder removed"}
