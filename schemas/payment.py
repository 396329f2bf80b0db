# schemas/payment.py
"""
Pydantic schemas for recording and listing payments.
"""
import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import Field, ConfigDict, field_validator

from models.payment import PaymentStatus, PaymentMethod, PaymentType
from .base import CamelModel, LocalDatetime, OptionalId


class PaymentCreate(CamelModel):
     """Request body for POST /payments."""

     tenant_id: int = Field(..., gt=0, description="Tenant the payment is for")
     unit_id: OptionalId = Field(None, description="Unit; defaults to the tenant's current unit")
     rent_amount: Decimal = Field(Decimal("0"), ge=0, description="Rent portion")
     deposit_amount: Decimal = Field(Decimal("0"), ge=0, description="Deposit portion")
     date: Optional[LocalDatetime] = Field(None, description="When the money was received")
     method: Optional[PaymentMethod] = None
     status: Optional[PaymentStatus] = Field(None, description="Defaults to paid (pending for lipa_na_mpesa)")
     month_covered: Optional[str] = Field(None, max_length=20, description="YYYY-MM")
     next_payment_date: Optional[dt.date] = Field(None, description="Moves the tenant's next due date")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "tenantId": 1,
                    "rentAmount": 15000,
                    "depositAmount": 0,
                    "method": "cash",
                    "monthCovered": "2026-10",
               }
          }
     )

     @field_validator("rent_amount", "deposit_amount", mode="before")
     @classmethod
     def _empty_amount_is_zero(cls, value):
          if value is None or (isinstance(value, str) and value.strip() == ""):
               return Decimal("0")
          return value

     @field_validator("status", mode="before")
     @classmethod
     def _normalize_status(cls, value):
          if value is None or value == "":
               return None
          return PaymentStatus.from_external(value)


class PaymentResponse(CamelModel):
     id: int
     tenant_id: Optional[int] = None
     tenant_name: Optional[str] = None
     tenant_email: Optional[str] = None
     unit_id: Optional[int] = None
     unit_number: Optional[str] = None
     amount: Decimal
     rent_amount: Decimal
     deposit_amount: Decimal
     date: dt.datetime
     method: Optional[PaymentMethod] = None
     status: PaymentStatus
     month_covered: Optional[str] = None
     type: PaymentType
     reference: Optional[str] = None
     checkout_request_id: Optional[str] = None
     created_at: dt.datetime
