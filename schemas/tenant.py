# schemas/tenant.py
"""
Pydantic schemas for tenants.

unitId arrives as "" from the frontend's empty select; it is treated as
"no unit" everywhere.
"""
import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import Field

from models.tenant import TenantStatus, IdType
from .base import CamelModel, OptionalId


class TenantCreate(CamelModel):
     name: str = Field(..., min_length=1, max_length=200)
     email: str
     phone: str = Field(..., min_length=1, max_length=50)
     id_type: IdType = IdType.NATIONAL_ID
     national_id: str = Field(..., min_length=1, max_length=100)
     unit_id: OptionalId = None
     status: TenantStatus = TenantStatus.ACTIVE
     lease_start: Optional[dt.date] = None
     lease_end: Optional[dt.date] = None
     rent_amount: Optional[Decimal] = Field(None, ge=0)
     deposit: Decimal = Field(Decimal("0"), ge=0)
     next_payment_date: Optional[dt.date] = None


class TenantUpdate(CamelModel):
     """
     Partial update. An explicit unitId (including null / "") moves the tenant;
     leaving unitId out keeps the current unit.
     """
     name: Optional[str] = Field(None, min_length=1, max_length=200)
     email: Optional[str] = None
     phone: Optional[str] = Field(None, min_length=1, max_length=50)
     id_type: Optional[IdType] = None
     national_id: Optional[str] = Field(None, min_length=1, max_length=100)
     unit_id: OptionalId = None
     status: Optional[TenantStatus] = None
     lease_start: Optional[dt.date] = None
     lease_end: Optional[dt.date] = None
     rent_amount: Optional[Decimal] = Field(None, ge=0)
     deposit: Optional[Decimal] = Field(None, ge=0)
     next_payment_date: Optional[dt.date] = None


class TenantResponse(CamelModel):
     id: int
     name: str
     email: str
     phone: str
     id_type: IdType
     national_id: str
     unit_id: OptionalId = None
     unit_number: Optional[str] = None
     status: TenantStatus
     lease_start: Optional[dt.date] = None
     lease_end: Optional[dt.date] = None
     rent_amount: Optional[Decimal] = None
     deposit: Decimal
     next_payment_date: Optional[dt.date] = None
     payment_status: Optional[str] = None  # paid, partial, unpaid (current month)
     created_at: dt.datetime
