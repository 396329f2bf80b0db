# routers/settings.py
import logging
import smtplib

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_session
from dependencies import require_admin
from models import User
from schemas.base import MessageResponse
from schemas.settings import SettingsSnapshot, SettingsUpdate, SmtpTestRequest
from services.activity_service import log_activity
from services.notification_service import verify_smtp
from services.settings_service import (
     SettingsProvider,
     get_settings_provider,
     to_snapshot,
     update_settings,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("", response_model=SettingsSnapshot)
def get_settings(
     db: Session = Depends(get_session),
     admin: User = Depends(require_admin),
     provider: SettingsProvider = Depends(get_settings_provider),
):
     return provider.get(db)


@router.put("", response_model=SettingsSnapshot)
def put_settings(
     body: SettingsUpdate,
     db: Session = Depends(get_session),
     admin: User = Depends(require_admin),
     provider: SettingsProvider = Depends(get_settings_provider),
):
     settings = update_settings(db, body)
     provider.invalidate()
     log_activity(db, admin, "Update Settings", "Organisation settings updated", "settings")
     return to_snapshot(settings)


@router.post("/test-smtp", response_model=MessageResponse)
def test_smtp(body: SmtpTestRequest, admin: User = Depends(require_admin)):
     try:
          verify_smtp(body.host, body.port, body.user, body.password)
     except (smtplib.SMTPException, OSError) as e:
          logger.warning("SMTP test against %s:%s failed: %s", body.host, body.port, e)
          raise HTTPException(400, f"SMTP Connection Failed: {e}")
     return {"message": "SMTP Connection Successful!"}
