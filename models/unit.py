# models/unit.py
import enum

from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
from .base import Base


class UnitStatus(str, enum.Enum):
     """Occupancy state of a unit. Kept in sync by services.occupancy_service."""
     VACANT = "vacant"
     OCCUPIED = "occupied"
     MAINTENANCE = "maintenance"


class Unit(Base):
     """
     Unit model - individual rentable units within a property.
     """
     __tablename__ = "units"

     id = Column(Integer, primary_key=True, autoincrement=True)
     property_id = Column(Integer, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False, index=True)
     user_id = Column(Integer, ForeignKey("users.id"), nullable=True)

     unit_number = Column(String(50), nullable=False)
     type = Column(String(100), default="1 Bedroom", nullable=False)
     rent_amount = Column(Numeric(12, 2), nullable=False)
     status = Column(
          Enum(UnitStatus, name="unit_status", values_callable=lambda e: [m.value for m in e]),
          default=UnitStatus.VACANT,
          nullable=False,
          index=True,
     )
     bedrooms = Column(Integer, default=1, nullable=False)
     bathrooms = Column(Integer, default=1, nullable=False)
     size = Column(Numeric(10, 2), nullable=True)  # sqft

     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     property = relationship("Property", back_populates="units")
     tenants = relationship("Tenant", back_populates="unit")

     def __repr__(self):
          return f"<Unit(id={self.id}, unit_number='{self.unit_number}', status='{self.status}')>"
