# routers/tenants.py
"""
Tenant CRUD. Every change to a tenant's unit or status goes through
services.occupancy_service so unit occupancy stays consistent.
"""
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_current_user
from models import Tenant, User
from schemas.base import MessageResponse
from schemas.tenant import TenantCreate, TenantUpdate, TenantResponse
from services.activity_service import log_activity
from services.occupancy_service import (
     OccupancyError,
     assign_tenant_to_unit,
     release_tenant,
     update_tenancy,
)
from services.payment_service import (
     ZERO,
     classify_payment_status,
     expected_rent,
     rent_paid_by_tenant,
     start_of_month,
)

router = APIRouter(prefix="/api/tenants", tags=["tenants"])

_REQUIRED_FIELDS = ("name", "email", "phone", "id_type", "national_id", "deposit")


def _get_tenant(db: Session, tenant_id: int) -> Tenant:
     tenant = db.get(Tenant, tenant_id)
     if not tenant:
          raise HTTPException(404, "Tenant not found")
     return tenant


@router.get("", response_model=List[TenantResponse])
def list_tenants(db: Session = Depends(get_session), user: User = Depends(get_current_user)):
     """All tenants, each with this month's rent paymentStatus (paid, partial, unpaid)."""
     tenants = db.query(Tenant).order_by(Tenant.name).all()
     paid = rent_paid_by_tenant(db, start_of_month(datetime.now()))

     result = []
     for tenant in tenants:
          item = TenantResponse.model_validate(tenant)
          item.payment_status = classify_payment_status(paid.get(tenant.id, ZERO), expected_rent(tenant))
          result.append(item)
     return result


@router.post("", response_model=TenantResponse, status_code=status.HTTP_201_CREATED)
def create_tenant(
     body: TenantCreate,
     db: Session = Depends(get_session),
     user: User = Depends(get_current_user),
):
     tenant = Tenant(**body.model_dump(exclude={"unit_id"}))
     db.add(tenant)
     try:
          assign_tenant_to_unit(db, tenant, body.unit_id)
     except OccupancyError as e:
          db.rollback()
          log_activity(db, user, "Add Tenant Failed", f"Failed to add tenant: {e}", "tenant", "error")
          raise HTTPException(400, str(e))
     if tenant.rent_amount is None and tenant.unit is not None:
          tenant.rent_amount = tenant.unit.rent_amount
     db.commit()
     db.refresh(tenant)
     log_activity(db, user, "Add Tenant", f"Added tenant {tenant.name}", "tenant")
     return tenant


@router.put("/{tenant_id}", response_model=TenantResponse)
def update_tenant(
     tenant_id: int,
     body: TenantUpdate,
     db: Session = Depends(get_session),
     user: User = Depends(get_current_user),
):
     tenant = _get_tenant(db, tenant_id)
     changes = body.model_dump(exclude_unset=True, exclude={"unit_id", "status"})
     for field, value in changes.items():
          if value is None and field in _REQUIRED_FIELDS:
               continue
          setattr(tenant, field, value)

     tenancy = {"status": body.status}
     if "unit_id" in body.model_fields_set:
          tenancy["unit_id"] = body.unit_id
     try:
          update_tenancy(db, tenant, **tenancy)
     except OccupancyError as e:
          db.rollback()
          raise HTTPException(400, str(e))
     db.commit()
     db.refresh(tenant)
     log_activity(db, user, "Update Tenant", f"Updated tenant {tenant.name}", "tenant")
     return tenant


@router.delete("/{tenant_id}", response_model=MessageResponse)
def delete_tenant(
     tenant_id: int,
     db: Session = Depends(get_session),
     user: User = Depends(get_current_user),
):
     tenant = _get_tenant(db, tenant_id)
     name = tenant.name
     release_tenant(db, tenant)
     db.delete(tenant)
     db.commit()
     log_activity(db, user, "Delete Tenant", f"Removed tenant {name}", "tenant", "info")
     return {"message": "Tenant removed"}
