# services/report_service.py
"""
Report Service - dashboard figures, the six-month report series and the
KRA monthly rental income (MRI) tax helpers.
"""
import calendar
import logging
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Tuple

import requests
from sqlalchemy import func
from sqlalchemy.orm import Session

import config
from models import Expense, Payment, PaymentStatus, Property, Tenant, TenantStatus, Unit, UnitStatus
from models.payment import COLLECTED_STATUSES

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
CENT = Decimal("0.01")

_DISTRIBUTION = (
     (UnitStatus.OCCUPIED, "Occupied", "#10b981"),
     (UnitStatus.VACANT, "Vacant", "#f59e0b"),
     (UnitStatus.MAINTENANCE, "Maintenance", "#64748b"),
)


class KraError(Exception):
     """The KRA API rejected or failed a return filing."""


def _decimal(value) -> Decimal:
     return Decimal(str(value or 0))


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
     index = year * 12 + (month - 1) + delta
     return index // 12, index % 12 + 1


def month_bounds(year: int, month: int) -> Tuple[datetime, datetime]:
     start = datetime(year, month, 1)
     next_year, next_month = shift_month(year, month, 1)
     return start, datetime(next_year, next_month, 1)


def _unit_count(db: Session, status: Optional[UnitStatus] = None, user_id: Optional[int] = None) -> int:
     query = db.query(func.count(Unit.id))
     if status is not None:
          query = query.filter(Unit.status == status)
     if user_id is not None:
          query = query.filter(Unit.user_id == user_id)
     return query.scalar() or 0


def _active_tenant_rent(db: Session, until: Optional[datetime] = None) -> Decimal:
     """Sum of unit rent for active tenants (whose tenancy started before `until`)."""
     tenants = (
          db.query(Tenant)
          .filter(Tenant.status == TenantStatus.ACTIVE, Tenant.unit_id.isnot(None))
          .all()
     )
     total = ZERO
     for tenant in tenants:
          if until is not None:
               started = tenant.lease_start or (tenant.created_at.date() if tenant.created_at else None)
               if started is not None and started >= until.date():
                    continue
          total += _decimal(tenant.unit.rent_amount if tenant.unit else 0)
     return total


def dashboard_stats(db: Session, now: Optional[datetime] = None) -> dict:
     now = now or datetime.now()
     month_start, month_end = month_bounds(now.year, now.month)

     total_units = _unit_count(db)
     occupied = _unit_count(db, UnitStatus.OCCUPIED)
     collected = _decimal(
          db.query(func.coalesce(func.sum(Payment.amount), 0))
          .filter(
               Payment.status.in_(COLLECTED_STATUSES),
               Payment.date >= month_start,
               Payment.date < month_end,
          )
          .scalar()
     )
     expected = _active_tenant_rent(db)

     return {
          "total_properties": db.query(func.count(Property.id)).scalar() or 0,
          "total_units": total_units,
          "occupied_units": occupied,
          "vacant_units": _unit_count(db, UnitStatus.VACANT),
          "occupancy_rate": round(occupied / total_units * 100) if total_units else 0,
          "collected_this_month": collected,
          "outstanding_amount": max(ZERO, expected - collected),
          "expected_monthly_rent": expected,
     }


def revenue_series(db: Session, user_id: Optional[int], now: Optional[datetime] = None, months: int = 6) -> List[dict]:
     """Collected vs expected rent per month, oldest month first."""
     now = now or datetime.now()
     series = []
     for offset in range(months - 1, -1, -1):
          year, month = shift_month(now.year, now.month, -offset)
          start, end = month_bounds(year, month)
          query = db.query(func.coalesce(func.sum(Payment.amount), 0)).filter(
               Payment.status.in_(COLLECTED_STATUSES),
               Payment.date >= start,
               Payment.date < end,
          )
          if user_id is not None:
               query = query.filter(Payment.user_id == user_id)
          collected = _decimal(query.scalar())
          expected = _active_tenant_rent(db, until=end)
          series.append({
               "month": calendar.month_abbr[month],
               "collected": collected,
               "expected": max(expected, collected),
          })
     return series


def expense_series(db: Session, user_id: Optional[int], now: Optional[datetime] = None, months: int = 6) -> List[dict]:
     now = now or datetime.now()
     series = []
     for offset in range(months - 1, -1, -1):
          year, month = shift_month(now.year, now.month, -offset)
          start, end = month_bounds(year, month)
          query = db.query(func.coalesce(func.sum(Expense.amount), 0)).filter(
               Expense.date >= start,
               Expense.date < end,
          )
          if user_id is not None:
               query = query.filter(Expense.user_id == user_id)
          series.append({"month": calendar.month_abbr[month], "amount": _decimal(query.scalar())})
     return series


def unit_distribution(db: Session, user_id: Optional[int]) -> List[dict]:
     slices = [
          {"name": name, "value": _unit_count(db, status, user_id), "fill": fill}
          for status, name, fill in _DISTRIBUTION
     ]
     slices = [s for s in slices if s["value"] > 0]
     return slices or [{"name": "No Data", "value": 1, "fill": "#eee"}]


def kra_tax_report(db: Session, user_id: Optional[int], month: Optional[str] = None, now: Optional[datetime] = None) -> dict:
     """
     Gross rent received in a month and the MRI tax due on it.

     month is 'YYYY-MM' (defaults to the current month).

     Raises:
          ValueError: month is not 'YYYY-MM'
     """
     if month:
          try:
               period = datetime.strptime(month, "%Y-%m")
          except ValueError:
               raise ValueError("month must be in YYYY-MM format")
     else:
          period = now or datetime.now()
     start, end = month_bounds(period.year, period.month)

     query = db.query(Payment).filter(
          Payment.status == PaymentStatus.PAID,
          Payment.date >= start,
          Payment.date < end,
     )
     if user_id is not None:
          query = query.filter(Payment.user_id == user_id)

     gross = ZERO
     for payment in query.all():
          rent = _decimal(payment.rent_amount)
          gross += rent if rent > ZERO else _decimal(payment.amount)

     tax = (gross * Decimal(str(config.KRA_MRI_RATE))).quantize(CENT, rounding=ROUND_HALF_UP)
     return {
          "month": start.strftime("%B %Y"),
          "gross_rent": gross,
          "tax_payable": tax,
          "currency": "KES",
          "note": f"Based on {config.KRA_MRI_RATE * 100:g}% MRI Rate",
     }


def get_kra_token() -> str:
     response = requests.post(
          config.KRA_TOKEN_URL,
          params={"grant_type": "client_credentials"},
          auth=(config.KRA_CLIENT_ID, config.KRA_CLIENT_SECRET),
          timeout=30,
     )
     response.raise_for_status()
     token = response.json().get("access_token")
     if not token:
          raise ValueError("KRA token response had no access_token")
     return token


def file_kra_return(gross_rent, tax, period: str) -> dict:
     """
     File a rental income return with KRA.

     Without credentials, or when the token request fails, the filing is
     simulated and reported as successful.

     Raises:
          KraError: the filing request itself failed
     """
     if not config.KRA_CLIENT_ID or not config.KRA_CLIENT_SECRET:
          logger.warning("KRA credentials missing; simulating return for %s", period)
          return {
               "success": True,
               "message": "Return filed (Simulated - Missing Env Vars)",
               "data": {"simulated": True, "note": "Configure KRA_CLIENT_ID and KRA_CLIENT_SECRET in .env"},
          }

     try:
          token = get_kra_token()
     except (requests.RequestException, ValueError) as e:
          logger.error("KRA token request failed: %s", e)
          return {
               "success": True,
               "message": "Return filed (Simulated - Token Failed)",
               "data": {"simulated": True, "originalError": str(e)},
          }

     try:
          response = requests.post(
               f"{config.KRA_API_BASE}/generate/v1/prn/whtrental",
               json={"taxPayable": float(tax), "grossIncome": float(gross_rent), "period": period},
               headers={"Authorization": f"Bearer {token}"},
               timeout=30,
          )
          response.raise_for_status()
          data = response.json()
     except (requests.RequestException, ValueError) as e:
          logger.error("KRA return filing failed: %s", e)
          raise KraError(str(e)) from e

     logger.info("KRA return filed for %s", period)
     return {"success": True, "message": "Return filed via KRA Sandbox.", "data": data}
