# models/activity_log.py
from sqlalchemy import Column, Integer, String, Text, DateTime, func
from .base import Base


class ActivityLog(Base):
     """
     ActivityLog model - audit trail of user and system actions.
     Written best-effort by services.activity_service.log_activity.
     """
     __tablename__ = "activity_logs"

     id = Column(Integer, primary_key=True, autoincrement=True)
     user = Column(String(200), nullable=True)  # User name, or "System"
     action = Column(String(255), nullable=False)
     description = Column(Text, nullable=True)
     type = Column(String(50), nullable=True)  # auth, payment, tenant, settings, property, reminder
     status = Column(String(20), default="success", nullable=False)  # success, info, warning, error
     timestamp = Column(DateTime, server_default=func.now(), nullable=False, index=True)

     def __repr__(self):
          return f"<ActivityLog(id={self.id}, action='{self.action}', status='{self.status}')>"
