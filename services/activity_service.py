# services/activity_service.py
"""
Activity Service - append-only audit trail shown on the dashboard.
"""
import logging
from typing import List, Optional, Union

from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models import ActivityLog, User

logger = logging.getLogger(__name__)


def _actor_name(user: Union[User, str, None]) -> str:
     if isinstance(user, User):
          return user.name
     if user:
          return str(user)
     return "System"


def log_activity(
     db: Session,
     user: Union[User, str, None],
     action: str,
     description: Optional[str] = None,
     type: str = "info",
     status: str = "success",
) -> None:
     """
     Record an activity entry.

     Runs after the caller's own commit and commits its row separately. A
     failed write is rolled back and logged; it never fails the request.
     """
     entry = ActivityLog(
          user=_actor_name(user),
          action=action,
          description=description,
          type=type,
          status=status,
     )
     try:
          db.add(entry)
          db.commit()
     except SQLAlchemyError:
          db.rollback()
          logger.exception("Failed to write activity log entry '%s'", action)


def list_recent_activity(db: Session, limit: int = 100) -> List[ActivityLog]:
     return (
          db.query(ActivityLog)
          .order_by(desc(ActivityLog.timestamp), desc(ActivityLog.id))
          .limit(limit)
          .all()
     )
