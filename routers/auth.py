# routers/auth.py
"""
Registration, email verification and login.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

import config
from database import get_session
from models import User
from schemas.auth import (
     RegisterRequest,
     RegisterResponse,
     VerifyEmailRequest,
     LoginRequest,
     AuthResponse,
)
from services.activity_service import log_activity
from services.auth_service import (
     hash_password,
     verify_password,
     create_access_token,
     generate_otp,
     otp_is_valid,
)
from services.notification_service import Notifier, NotificationError
from services.settings_service import SettingsProvider, get_settings_provider
from utils.email_templates import otp_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _find_user(db: Session, email: str):
     return db.query(User).filter(User.email == email.strip().lower()).first()


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
     body: RegisterRequest,
     db: Session = Depends(get_session),
     provider: SettingsProvider = Depends(get_settings_provider),
):
     if body.confirm_password is not None and body.password != body.confirm_password:
          raise HTTPException(400, "Passwords do not match")
     if _find_user(db, body.email):
          raise HTTPException(400, "User already exists")

     otp, otp_expires_at = generate_otp()
     user = User(
          name=body.name,
          email=body.email.strip().lower(),
          phone=body.phone,
          password=hash_password(body.password),
          role=body.role,
          is_verified=False,
          otp=otp,
          otp_expires_at=otp_expires_at,
     )
     db.add(user)
     db.commit()
     db.refresh(user)

     settings = provider.get(db)
     message = "Registration successful. Please verify your email."
     email_sent = True
     try:
          Notifier(settings).send_email(user.email, "Your Verification Code", otp_email(user.name, otp, settings.org_name))
     except NotificationError as e:
          logger.error("Verification email to %s failed: %s", user.email, e)
          message = "Account created but email failed. Contact support or check console logs."
          email_sent = False

     log_activity(db, user, "User Registered", f"{user.name} registered as {user.role.value}", "auth")
     return RegisterResponse(
          message=message,
          requires_verification=True,
          email=user.email,
          otp=otp if email_sent and config.APP_ENV != "production" else None,
     )


@router.post("/verify-email", response_model=AuthResponse)
def verify_email(body: VerifyEmailRequest, db: Session = Depends(get_session)):
     user = _find_user(db, body.email)
     if user is None or not otp_is_valid(user, body.otp):
          raise HTTPException(400, "Invalid or expired OTP")

     user.is_verified = True
     user.otp = None
     user.otp_expires_at = None
     db.commit()

     return AuthResponse(
          id=user.id,
          name=user.name,
          email=user.email,
          role=user.role,
          avatar=user.avatar,
          token=create_access_token(user.id),
          message="Email verified successfully",
     )


@router.post("/login", response_model=AuthResponse)
def login(body: LoginRequest, db: Session = Depends(get_session)):
     user = _find_user(db, body.email)
     if user is None or not verify_password(body.password, user.password):
          log_activity(db, "System", "Login Failed", f"Failed login attempt for {body.email}", "auth", "warning")
          raise HTTPException(status_code=401, detail="Invalid email or password")

     log_activity(db, user, "User Logged In", f"User {user.name} logged in successfully", "auth")
     return AuthResponse(
          id=user.id,
          name=user.name,
          email=user.email,
          role=user.role,
          avatar=user.avatar,
          token=create_access_token(user.id),
     )
