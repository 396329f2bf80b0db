# routers/users.py
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_session
from dependencies import require_admin
from models import User, UserRole
from schemas.auth import UserResponse

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=List[UserResponse])
def list_users(
     role: Optional[UserRole] = None,
     db: Session = Depends(get_session),
     admin: User = Depends(require_admin),
):
     """List dashboard accounts, optionally filtered by role. Passwords are never returned."""
     query = db.query(User)
     if role is not None:
          query = query.filter(User.role == role)
     return query.order_by(User.name).all()
