# schemas/auth.py
"""
Pydantic schemas for registration, email verification and login.
"""
from datetime import datetime
from typing import Optional

from pydantic import Field, ConfigDict

from models.user import UserRole
from .base import CamelModel


class RegisterRequest(CamelModel):
     name: str = Field(..., min_length=1, max_length=200)
     email: str
     password: str = Field(..., min_length=6)
     confirm_password: Optional[str] = None
     phone: Optional[str] = None
     role: UserRole = UserRole.ADMIN

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "name": "Jane Landlord",
                    "email": "jane@example.com",
                    "password": "secret123",
                    "confirmPassword": "secret123",
                    "role": "admin",
               }
          }
     )


class RegisterResponse(CamelModel):
     message: str
     requires_verification: bool = True
     email: str
     otp: Optional[str] = None  # Only echoed outside production


class VerifyEmailRequest(CamelModel):
     email: str
     otp: str = Field(..., min_length=4, max_length=10)


class LoginRequest(CamelModel):
     email: str
     password: str


class AuthResponse(CamelModel):
     """Returned by login and verify-email: the user plus a bearer token."""
     id: int
     name: str
     email: str
     role: UserRole
     avatar: Optional[str] = None
     token: str
     message: Optional[str] = None


class UserResponse(CamelModel):
     id: int
     name: str
     email: str
     phone: Optional[str] = None
     role: UserRole
     avatar: Optional[str] = None
     is_verified: bool
     created_at: datetime
