# models/tenant.py
import enum

from sqlalchemy import Column, Integer, String, Numeric, Date, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
from .base import Base


class TenantStatus(str, enum.Enum):
     ACTIVE = "active"
     PAST = "past"


class IdType(str, enum.Enum):
     NATIONAL_ID = "national_id"
     PASSPORT = "passport"
     DRIVING_LICENSE = "driving_license"


class Tenant(Base):
     """
     Tenant model - a lessee bound to at most one unit at a time.

     unit_id must only be changed through services.occupancy_service so that
     the referenced unit's status stays consistent with active tenancy.
     """
     __tablename__ = "tenants"

     id = Column(Integer, primary_key=True, autoincrement=True)

     # Personal info
     name = Column(String(200), nullable=False)
     email = Column(String(255), nullable=False)
     phone = Column(String(50), nullable=False)

     # ID verification
     id_type = Column(
          Enum(IdType, name="tenant_id_type", values_callable=lambda e: [m.value for m in e]),
          default=IdType.NATIONAL_ID,
          nullable=False,
     )
     national_id = Column(String(100), nullable=False)

     # Tenancy
     unit_id = Column(Integer, ForeignKey("units.id", ondelete="SET NULL"), nullable=True, index=True)
     status = Column(
          Enum(TenantStatus, name="tenant_status", values_callable=lambda e: [m.value for m in e]),
          default=TenantStatus.ACTIVE,
          nullable=False,
          index=True,
     )
     lease_start = Column(Date, nullable=True)
     lease_end = Column(Date, nullable=True)
     rent_amount = Column(Numeric(12, 2), nullable=True)  # Snapshot of rent at lease start
     deposit = Column(Numeric(12, 2), default=0, nullable=False)
     next_payment_date = Column(Date, nullable=True)

     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     unit = relationship("Unit", back_populates="tenants")
     payments = relationship("Payment", back_populates="tenant")  # kept (tenant_id nulled) on delete

     @property
     def is_active(self) -> bool:
          return self.status == TenantStatus.ACTIVE

     @property
     def unit_number(self):
          return self.unit.unit_number if self.unit else None

     def __repr__(self):
          return f"<Tenant(id={self.id}, name='{self.name}', status='{self.status}')>"
