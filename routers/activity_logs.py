# routers/activity_logs.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_current_user
from models import User
from schemas.activity import ActivityLogResponse
from services.activity_service import list_recent_activity

router = APIRouter(prefix="/api/activity-logs", tags=["activity-logs"])


@router.get("", response_model=List[ActivityLogResponse])
def get_activity_logs(db: Session = Depends(get_session), user: User = Depends(get_current_user)):
     """Latest 100 entries, newest first."""
     return list_recent_activity(db, limit=100)
