# routers/reports.py
"""
Reports page data and KRA rental income tax.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_current_user
from models import User
from schemas.reports import (
     ReportsResponse,
     KraTaxReport,
     KraFileReturnRequest,
     KraFileReturnResponse,
)
from services.activity_service import log_activity
from services.report_service import (
     KraError,
     expense_series,
     file_kra_return,
     kra_tax_report,
     revenue_series,
     unit_distribution,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("", response_model=ReportsResponse)
def get_reports(db: Session = Depends(get_session), user: User = Depends(get_current_user)):
     return {
          "revenue_data": revenue_series(db, user.id),
          "tenant_data": unit_distribution(db, user.id),
          "expense_data": expense_series(db, user.id),
     }


@router.get("/kra-tax-report", response_model=KraTaxReport)
def get_kra_tax_report(
     month: Optional[str] = None,
     db: Session = Depends(get_session),
     user: User = Depends(get_current_user),
):
     try:
          return kra_tax_report(db, user.id, month)
     except ValueError as e:
          raise HTTPException(400, str(e))


@router.post("/kra-file-return", response_model=KraFileReturnResponse)
def post_kra_file_return(
     body: KraFileReturnRequest,
     db: Session = Depends(get_session),
     user: User = Depends(get_current_user),
):
     log_activity(db, user, "KRA Return Filed", f"Initiating KRA Filing for {body.period}", "system", "info")
     try:
          result = file_kra_return(body.gross_rent, body.tax, body.period)
     except KraError as e:
          log_activity(db, user, "KRA Return Error", f"Error: {e}", "system", "error")
          return JSONResponse(
               status_code=500,
               content={"success": False, "message": "Failed to file return via KRA API", "error": str(e)},
          )
     if not result["data"] or not result["data"].get("simulated"):
          log_activity(db, user, "KRA Return Success", f"KRA Response: {result['data']}", "system")
     return result
