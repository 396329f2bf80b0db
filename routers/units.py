# routers/units.py
"""
Unit CRUD. A unit's occupied / vacant status is never taken from the
request; it is derived by services.occupancy_service.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_current_user, require_admin
from models import Property, Unit, User
from schemas.base import MessageResponse
from schemas.unit import UnitCreate, UnitUpdate, UnitResponse
from services.activity_service import log_activity
from services.occupancy_service import OccupancyError, apply_requested_unit_status, detach_unit

router = APIRouter(prefix="/api/units", tags=["units"])

_REQUIRED_FIELDS = ("unit_number", "type", "rent_amount", "bedrooms", "bathrooms")


def _get_unit(db: Session, unit_id: int) -> Unit:
     unit = db.get(Unit, unit_id)
     if not unit:
          raise HTTPException(404, "Unit not found")
     return unit


@router.get("", response_model=List[UnitResponse])
def list_units(
     property_id: Optional[int] = Query(None, alias="propertyId"),
     db: Session = Depends(get_session),
     user: User = Depends(get_current_user),
):
     query = db.query(Unit)
     if property_id is not None:
          query = query.filter(Unit.property_id == property_id)
     return query.order_by(Unit.property_id, Unit.unit_number).all()


@router.post("", response_model=UnitResponse, status_code=status.HTTP_201_CREATED)
def create_unit(
     body: UnitCreate,
     db: Session = Depends(get_session),
     admin: User = Depends(require_admin),
):
     if db.get(Property, body.property_id) is None:
          raise HTTPException(400, f"Property with ID {body.property_id} not found")

     unit = Unit(**body.model_dump(exclude={"status"}), user_id=admin.id)
     db.add(unit)
     try:
          apply_requested_unit_status(db, unit, body.status)
     except OccupancyError as e:
          raise HTTPException(400, str(e))
     db.commit()
     db.refresh(unit)
     log_activity(db, admin, "Add Unit", f"Added unit {unit.unit_number}", "property")
     return unit


@router.put("/{unit_id}", response_model=UnitResponse)
def update_unit(
     unit_id: int,
     body: UnitUpdate,
     db: Session = Depends(get_session),
     admin: User = Depends(require_admin),
):
     unit = _get_unit(db, unit_id)
     changes = body.model_dump(exclude_unset=True, exclude={"status"})
     for field, value in changes.items():
          if value is None and field in _REQUIRED_FIELDS:
               continue
          setattr(unit, field, value)
     try:
          apply_requested_unit_status(db, unit, body.status)
     except OccupancyError as e:
          raise HTTPException(400, str(e))
     db.commit()
     db.refresh(unit)
     return unit


@router.delete("/{unit_id}", response_model=MessageResponse)
def delete_unit(
     unit_id: int,
     db: Session = Depends(get_session),
     admin: User = Depends(require_admin),
):
     unit = _get_unit(db, unit_id)
     number = unit.unit_number
     detach_unit(db, unit)
     db.delete(unit)
     db.commit()
     log_activity(db, admin, "Delete Unit", f"Deleted unit {number}", "property", "info")
     return {"message": "Unit removed"}
