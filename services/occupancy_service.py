# services/occupancy_service.py
"""
Occupancy Service - the only code allowed to change which unit a tenant
occupies or to derive a unit's occupancy status.

Invariant kept by every function here: after it returns (and the session
is flushed), Unit.status == OCCUPIED exactly when at least one ACTIVE
tenant references the unit. A vacant unit may instead be in MAINTENANCE.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from models import Payment, Tenant, TenantStatus, Unit, UnitStatus

logger = logging.getLogger(__name__)

_UNCHANGED = object()


class OccupancyError(ValueError):
     """A tenancy change that would break the occupancy rules."""


def _active_holder(db: Session, unit_id: int, exclude_tenant_id: Optional[int] = None) -> Optional[Tenant]:
     query = db.query(Tenant).filter(
          Tenant.unit_id == unit_id,
          Tenant.status == TenantStatus.ACTIVE,
     )
     if exclude_tenant_id is not None:
          query = query.filter(Tenant.id != exclude_tenant_id)
     return query.first()


def sync_unit_status(db: Session, unit: Optional[Unit]) -> None:
     """Recompute unit.status from the active tenants referencing it."""
     if unit is None:
          return
     db.flush()
     if _active_holder(db, unit.id) is not None:
          unit.status = UnitStatus.OCCUPIED
     elif unit.status != UnitStatus.MAINTENANCE:
          unit.status = UnitStatus.VACANT


def _ensure_free(db: Session, unit: Unit, tenant: Tenant) -> None:
     holder = _active_holder(db, unit.id, exclude_tenant_id=tenant.id)
     if holder is not None:
          raise OccupancyError(f"Unit {unit.unit_number} is already occupied by {holder.name}")


def assign_tenant_to_unit(db: Session, tenant: Tenant, unit_id: Optional[int]) -> Optional[Unit]:
     """
     Point tenant at unit_id (or at no unit when None).

     The tenant must already be added to the session. The previous unit is
     re-synced (usually becoming vacant) and the new unit becomes occupied
     when the tenant is active.

     Raises:
          OccupancyError: unit does not exist, or another active tenant holds it
     """
     previous_unit = tenant.unit
     new_unit = None
     if unit_id is not None:
          new_unit = db.get(Unit, unit_id)
          if new_unit is None:
               raise OccupancyError(f"Unit with ID {unit_id} not found")
          if tenant.status == TenantStatus.ACTIVE:
               _ensure_free(db, new_unit, tenant)

     tenant.unit = new_unit
     db.flush()

     if previous_unit is not None and previous_unit is not new_unit:
          sync_unit_status(db, previous_unit)
     sync_unit_status(db, new_unit)

     if previous_unit is not new_unit:
          logger.info(
               "Tenant %s moved from unit %s to unit %s",
               tenant.id,
               previous_unit.id if previous_unit else None,
               new_unit.id if new_unit else None,
          )
     return new_unit


def update_tenancy(db: Session, tenant: Tenant, unit_id=_UNCHANGED, status: Optional[TenantStatus] = None) -> None:
     """
     Apply a status and/or unit change coming from a tenant update.

     unit_id left at its default keeps the current unit; an explicit None
     moves the tenant out.
     """
     if status is not None:
          tenant.status = status

     if unit_id is not _UNCHANGED:
          assign_tenant_to_unit(db, tenant, unit_id)
          return

     if tenant.unit is not None and tenant.status == TenantStatus.ACTIVE:
          _ensure_free(db, tenant.unit, tenant)
     sync_unit_status(db, tenant.unit)


def release_tenant(db: Session, tenant: Tenant) -> Optional[Unit]:
     """
     Detach a tenant that is about to be deleted.

     Only an active tenant releases its unit. A past tenant leaves every unit
     untouched.
     """
     if tenant.status != TenantStatus.ACTIVE or tenant.unit is None:
          return None
     unit = tenant.unit
     tenant.unit = None
     sync_unit_status(db, unit)
     logger.info("Tenant %s released unit %s", tenant.id, unit.id)
     return unit


def apply_requested_unit_status(db: Session, unit: Unit, requested: Optional[UnitStatus]) -> None:
     """
     Honour a status sent by a unit create / update.

     Only MAINTENANCE can be requested directly; OCCUPIED and VACANT are
     derived from tenancy. Asking for VACANT takes a unit out of maintenance.
     """
     if requested == UnitStatus.MAINTENANCE:
          if unit.id is not None:
               db.flush()
               if _active_holder(db, unit.id) is not None:
                    raise OccupancyError("An occupied unit cannot be put into maintenance")
          unit.status = UnitStatus.MAINTENANCE
          return
     if requested == UnitStatus.VACANT and unit.status == UnitStatus.MAINTENANCE:
          unit.status = UnitStatus.VACANT
     if unit.id is None:
          unit.status = unit.status or UnitStatus.VACANT
          return
     sync_unit_status(db, unit)


def detach_unit(db: Session, unit: Unit) -> int:
     """
     Clear unit_id on every tenant and payment referencing unit, before it is
     deleted. Returns the number of tenants detached.
     """
     tenants = list(unit.tenants)
     for tenant in tenants:
          tenant.unit = None
     db.query(Payment).filter(Payment.unit_id == unit.id).update(
          {Payment.unit_id: None}, synchronize_session=False
     )
     db.flush()
     if tenants:
          logger.info("Detached %d tenant(s) from unit %s", len(tenants), unit.id)
     return len(tenants)
