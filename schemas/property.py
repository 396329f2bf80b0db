# schemas/property.py
from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import CamelModel


class CaretakerSummary(CamelModel):
     id: int
     name: str
     email: str


class PropertyCreate(CamelModel):
     """Schema for creating a property."""
     name: str = Field(..., min_length=1, max_length=255)
     location: str = Field(..., min_length=1, max_length=255)
     type: str = "Apartment"
     caretaker_id: Optional[int] = None
     image: Optional[str] = None


class PropertyUpdate(CamelModel):
     """Schema for updating a property; only supplied fields change."""
     name: Optional[str] = Field(None, min_length=1, max_length=255)
     location: Optional[str] = Field(None, min_length=1, max_length=255)
     type: Optional[str] = None
     caretaker_id: Optional[int] = None
     image: Optional[str] = None


class PropertyResponse(CamelModel):
     id: int
     name: str
     location: str
     type: str
     caretaker_id: Optional[int] = None
     caretaker: Optional[CaretakerSummary] = None
     image: Optional[str] = None
     created_at: datetime
