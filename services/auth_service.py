# services/auth_service.py
"""
Auth Service - password hashing, JWTs and email verification codes.
"""
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from jose import jwt
from passlib.context import CryptContext

import config

# Bcrypt
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
     return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
     return pwd_context.verify(password, hashed)


def create_access_token(user_id: int, now: Optional[datetime] = None) -> str:
     """Signed {"id": user_id} token valid for JWT_EXPIRE_DAYS."""
     now = now or datetime.now(timezone.utc)
     payload = {"id": user_id, "exp": now + timedelta(days=config.JWT_EXPIRE_DAYS)}
     return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
     """Raises jose.JWTError when the token is invalid or expired."""
     return jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])


def generate_otp(now: Optional[datetime] = None) -> Tuple[str, datetime]:
     """Six digit code and its expiry time."""
     now = now or datetime.now()
     otp = f"{secrets.randbelow(1_000_000):06d}"
     return otp, now + timedelta(minutes=config.OTP_TTL_MINUTES)


def otp_is_valid(user, otp: str, now: Optional[datetime] = None) -> bool:
     now = now or datetime.now()
     if not user.otp or not user.otp_expires_at:
          return False
     return secrets.compare_digest(user.otp, otp.strip()) and user.otp_expires_at >= now
