# models/user.py
import enum

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum, func
from .base import Base


class UserRole(str, enum.Enum):
     """Roles for landlord-side accounts."""
     ADMIN = "admin"
     CARETAKER = "caretaker"


class User(Base):
     """
     User model - landlord / caretaker accounts that sign in to the dashboard.
     Tenants are not users; they live in the 'tenants' table.
     """
     __tablename__ = "users"

     id = Column(Integer, primary_key=True, autoincrement=True)
     name = Column(String(200), nullable=False)
     email = Column(String(255), unique=True, nullable=False, index=True)
     phone = Column(String(50), nullable=True)
     password = Column(String(255), nullable=False)  # bcrypt hash
     role = Column(
          Enum(UserRole, name="user_role", values_callable=lambda e: [m.value for m in e]),
          default=UserRole.ADMIN,
          nullable=False,
     )
     avatar = Column(String(500), default="https://github.com/shadcn.png", nullable=True)

     # Email verification
     is_verified = Column(Boolean, default=False, nullable=False)
     otp = Column(String(10), nullable=True)
     otp_expires_at = Column(DateTime, nullable=True)

     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     def __repr__(self):
          return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
