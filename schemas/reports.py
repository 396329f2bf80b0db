# schemas/reports.py
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import Field

from .base import CamelModel


class DashboardStats(CamelModel):
     total_properties: int
     total_units: int
     occupied_units: int
     vacant_units: int
     occupancy_rate: int
     collected_this_month: Decimal
     outstanding_amount: Decimal
     expected_monthly_rent: Decimal


class RevenuePoint(CamelModel):
     month: str
     collected: Decimal
     expected: Decimal


class ExpensePoint(CamelModel):
     month: str
     amount: Decimal


class DistributionSlice(CamelModel):
     name: str
     value: int
     fill: str


class ReportsResponse(CamelModel):
     revenue_data: List[RevenuePoint]
     tenant_data: List[DistributionSlice]
     expense_data: List[ExpensePoint]


class KraTaxReport(CamelModel):
     month: str  # e.g. "October 2026"
     gross_rent: Decimal
     tax_payable: Decimal
     currency: str = "KES"
     note: str = "Based on 7.5% MRI Rate"


class KraFileReturnRequest(CamelModel):
     gross_rent: Decimal = Field(..., ge=0)
     tax: Decimal = Field(..., ge=0)
     period: str = Field(..., min_length=1, max_length=20)


class KraFileReturnResponse(CamelModel):
     success: bool
     message: str
     data: Optional[Dict[str, Any]] = None
