# routers/properties.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_current_user, require_admin
from models import Expense, Property, User
from schemas.base import MessageResponse
from schemas.property import PropertyCreate, PropertyUpdate, PropertyResponse
from services.activity_service import log_activity
from services.occupancy_service import detach_unit

router = APIRouter(prefix="/api/properties", tags=["properties"])


def _get_property(db: Session, property_id: int) -> Property:
     prop = db.get(Property, property_id)
     if not prop:
          raise HTTPException(404, "Property not found")
     return prop


def _check_caretaker(db: Session, caretaker_id):
     if caretaker_id is not None and db.get(User, caretaker_id) is None:
          raise HTTPException(400, f"User with ID {caretaker_id} not found")


@router.get("", response_model=List[PropertyResponse])
def list_properties(db: Session = Depends(get_session), user: User = Depends(get_current_user)):
     return db.query(Property).order_by(Property.name).all()


@router.post("", response_model=PropertyResponse, status_code=status.HTTP_201_CREATED)
def create_property(
     body: PropertyCreate,
     db: Session = Depends(get_session),
     user: User = Depends(get_current_user),
):
     _check_caretaker(db, body.caretaker_id)
     prop = Property(**body.model_dump())
     db.add(prop)
     db.commit()
     db.refresh(prop)
     log_activity(db, user, "Add Property", f"Added property {prop.name}", "property")
     return prop


@router.put("/{property_id}", response_model=PropertyResponse)
def update_property(
     property_id: int,
     body: PropertyUpdate,
     db: Session = Depends(get_session),
     user: User = Depends(get_current_user),
):
     prop = _get_property(db, property_id)
     changes = body.model_dump(exclude_unset=True)
     if "caretaker_id" in changes:
          _check_caretaker(db, changes["caretaker_id"])
     for field, value in changes.items():
          if value is None and field in ("name", "location", "type"):
               continue
          setattr(prop, field, value)
     db.commit()
     db.refresh(prop)
     return prop


@router.delete("/{property_id}", response_model=MessageResponse)
def delete_property(
     property_id: int,
     db: Session = Depends(get_session),
     admin: User = Depends(require_admin),
):
     prop = _get_property(db, property_id)
     name = prop.name
     for unit in prop.units:
          detach_unit(db, unit)
     db.query(Expense).filter(Expense.property_id == prop.id).update(
          {Expense.property_id: None}, synchronize_session=False
     )
     db.delete(prop)
     db.commit()
     log_activity(db, admin, "Delete Property", f"Deleted property {name}", "property", "info")
     return {"message": "Property removed"}
