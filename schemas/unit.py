# schemas/unit.py
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from models.unit import UnitStatus
from .base import CamelModel


class UnitCreate(CamelModel):
     """
     Schema for creating a unit.

     status may only request 'maintenance'; occupied / vacant are derived
     from tenancy.
     """
     property_id: int = Field(..., gt=0)
     unit_number: str = Field(..., min_length=1, max_length=50)
     type: str = "1 Bedroom"
     rent_amount: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
     status: Optional[UnitStatus] = None
     bedrooms: int = Field(1, ge=0)
     bathrooms: int = Field(1, ge=0)
     size: Optional[Decimal] = Field(None, ge=0)


class UnitUpdate(CamelModel):
     unit_number: Optional[str] = Field(None, min_length=1, max_length=50)
     type: Optional[str] = None
     rent_amount: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
     status: Optional[UnitStatus] = None
     bedrooms: Optional[int] = Field(None, ge=0)
     bathrooms: Optional[int] = Field(None, ge=0)
     size: Optional[Decimal] = Field(None, ge=0)


class UnitResponse(CamelModel):
     id: int
     property_id: int
     unit_number: str
     type: str
     rent_amount: Decimal
     status: UnitStatus
     bedrooms: int
     bathrooms: int
     size: Optional[Decimal] = None
     user_id: Optional[int] = None
     created_at: datetime
