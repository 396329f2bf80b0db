# dependencies.py
"""
Shared FastAPI dependencies: bearer-token auth and role checks.
"""
from fastapi import Depends, HTTPException, Request
from jose import JWTError
from sqlalchemy.orm import Session

from database import get_session
from models import User, UserRole
from services.auth_service import decode_access_token


# Token Auth Dependency
def verify_token(request: Request) -> dict:
    auth = request.headers.get("Authorization")
    if not auth or not auth.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Not authorized, no token")
    token = auth.split(" ", 1)[1]
    try:
        return decode_access_token(token)
    except JWTError:
        raise HTTPException(status_code=403, detail="Invalid token")


def get_current_user(token: dict = Depends(verify_token), db: Session = Depends(get_session)) -> User:
    user_id = token.get("id")
    user = db.get(User, user_id) if user_id is not None else None
    if user is None:
        raise HTTPException(status_code=401, detail="Not authorized, user not found")
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.role != UserRole.ADMIN:
        raise HTTPException(status_code=403, detail="Not authorized as an admin")
    return user
