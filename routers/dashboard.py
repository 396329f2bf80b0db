# routers/dashboard.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_current_user
from models import User
from schemas.reports import DashboardStats
from services.report_service import dashboard_stats

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStats)
def get_dashboard_stats(db: Session = Depends(get_session), user: User = Depends(get_current_user)):
     return dashboard_stats(db)
