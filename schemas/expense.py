# schemas/expense.py
import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import Field

from .base import CamelModel, LocalDatetime


class ExpenseCreate(CamelModel):
     title: str = Field(..., min_length=1, max_length=255)
     amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
     category: str = Field(..., min_length=1, max_length=100)
     date: Optional[LocalDatetime] = None
     description: Optional[str] = None
     property_id: Optional[int] = None


class ExpenseResponse(CamelModel):
     id: int
     title: str
     amount: Decimal
     category: str
     date: dt.datetime
     description: Optional[str] = None
     property_id: Optional[int] = None
     user_id: Optional[int] = None
     created_at: dt.datetime
