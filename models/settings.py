# models/settings.py
"""
Settings model - the single organisation / integration configuration row.

Exactly one row is expected. It is created lazily on first read by
services.settings_service.get_or_create_settings. The nested notification
and integration blocks are stored as JSON; their shape is defined by the
Pydantic models in schemas/settings.py.
"""
from sqlalchemy import Column, Integer, String, JSON, DateTime, func
from .base import Base


class Settings(Base):
     __tablename__ = "settings"

     id = Column(Integer, primary_key=True, autoincrement=True)

     # Organization details
     org_name = Column(String(255), default="My Rental Company", nullable=False)
     org_email = Column(String(255), default="admin@rental.com", nullable=False)
     org_phone = Column(String(50), default="", nullable=False)
     org_address = Column(String(500), default="", nullable=False)
     tax_id = Column(String(100), default="", nullable=False)

     # App preferences
     currency = Column(String(10), default="USD", nullable=False)
     timezone = Column(String(64), default="UTC", nullable=False)

     notifications = Column(JSON, nullable=True)
     integrations = Column(JSON, nullable=True)

     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     def __repr__(self):
          return f"<Settings(id={self.id}, org_name='{self.org_name}')>"
