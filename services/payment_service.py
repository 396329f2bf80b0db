# services/payment_service.py
"""
Payment Service - business rules for recording rent and deposit payments.

A payment is split into a rent part and a deposit part; the stored amount
is always their sum and the payment type follows from which parts are
non-zero. Only 'paid' and 'partial' payments count as money received.
"""
import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Dict, Optional, Tuple

from sqlalchemy import desc, func
from sqlalchemy.orm import Session

from models import Payment, Tenant, User
from models.payment import (
     COLLECTED_STATUSES,
     PaymentMethod,
     PaymentStatus,
     PaymentType,
)
from schemas.payment import PaymentCreate

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def _to_amount(value) -> Decimal:
     """Coerce a user supplied amount to a non-negative Decimal."""
     if value is None or value == "":
          return ZERO
     try:
          amount = Decimal(str(value))
     except InvalidOperation:
          raise ValueError(f"Invalid amount: {value!r}")
     return amount if amount > ZERO else ZERO


def split_amounts(rent, deposit) -> Tuple[Decimal, Decimal, Decimal, PaymentType]:
     """
     Return (rent, deposit, total, type).

     Raises:
          ValueError: if both parts are zero
     """
     rent_amount = _to_amount(rent)
     deposit_amount = _to_amount(deposit)
     total = rent_amount + deposit_amount
     if total <= ZERO:
          raise ValueError("No payment amount provided")

     if rent_amount > ZERO and deposit_amount > ZERO:
          payment_type = PaymentType.COMBINED
     elif deposit_amount > ZERO:
          payment_type = PaymentType.DEPOSIT
     else:
          payment_type = PaymentType.RENT
     return rent_amount, deposit_amount, total, payment_type


def start_of_month(now: datetime) -> datetime:
     return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def record_payment(db: Session, data: PaymentCreate, tenant: Tenant, user: Optional[User] = None) -> Payment:
     """
     Persist a manually recorded payment.

     Status defaults to paid, or pending for Lipa na M-Pesa until the
     gateway confirms it. The tenant's next due date moves when supplied.
     """
     rent_amount, deposit_amount, total, payment_type = split_amounts(data.rent_amount, data.deposit_amount)

     paid_on = data.date or datetime.now()
     method = data.method or PaymentMethod.CASH
     status = data.status
     if status is None:
          status = PaymentStatus.PENDING if method == PaymentMethod.LIPA_NA_MPESA else PaymentStatus.PAID

     if rent_amount > ZERO:
          month_covered = data.month_covered or paid_on.strftime("%Y-%m")
     else:
          month_covered = "Deposit"

     payment = Payment(
          tenant=tenant,
          unit_id=data.unit_id or tenant.unit_id,
          user_id=user.id if user else None,
          amount=total,
          rent_amount=rent_amount,
          deposit_amount=deposit_amount,
          date=paid_on,
          method=method,
          status=status,
          month_covered=month_covered,
          type=payment_type,
     )
     if data.next_payment_date:
          tenant.next_payment_date = data.next_payment_date

     db.add(payment)
     db.commit()
     db.refresh(payment)
     logger.info(
          "Recorded %s payment id=%s tenant=%s amount=%s status=%s",
          payment_type.value, payment.id, tenant.id, total, status.value,
     )
     return payment


def create_pending_mpesa_payment(
     db: Session,
     tenant: Tenant,
     amount,
     checkout_request_id: str,
     unit_id: Optional[int] = None,
     user: Optional[User] = None,
     now: Optional[datetime] = None,
) -> Payment:
     """Persist the pending rent payment behind an STK push that had no payment yet."""
     now = now or datetime.now()
     rent_amount = _to_amount(amount)
     payment = Payment(
          tenant=tenant,
          unit_id=unit_id or tenant.unit_id,
          user_id=user.id if user else None,
          amount=rent_amount,
          rent_amount=rent_amount,
          deposit_amount=ZERO,
          date=now,
          method=PaymentMethod.LIPA_NA_MPESA,
          status=PaymentStatus.PENDING,
          month_covered=now.strftime("%Y-%m"),
          type=PaymentType.RENT,
          checkout_request_id=checkout_request_id,
     )
     db.add(payment)
     db.commit()
     db.refresh(payment)
     return payment


def list_payments(db: Session):
     return db.query(Payment).order_by(desc(Payment.date), desc(Payment.id)).all()


def rent_paid_by_tenant(db: Session, since: datetime) -> Dict[int, Decimal]:
     """Rent collected per tenant since a date (Rent / Combined, paid or partial)."""
     rows = (
          db.query(Payment.tenant_id, func.coalesce(func.sum(Payment.rent_amount), 0))
          .filter(
               Payment.tenant_id.isnot(None),
               Payment.type.in_([PaymentType.RENT, PaymentType.COMBINED]),
               Payment.status.in_(COLLECTED_STATUSES),
               Payment.date >= since,
          )
          .group_by(Payment.tenant_id)
          .all()
     )
     return {tenant_id: Decimal(str(total)) for tenant_id, total in rows}


def expected_rent(tenant: Tenant) -> Decimal:
     if tenant.rent_amount is not None:
          return Decimal(str(tenant.rent_amount))
     if tenant.unit is not None and tenant.unit.rent_amount is not None:
          return Decimal(str(tenant.unit.rent_amount))
     return ZERO


def classify_payment_status(paid: Decimal, expected: Decimal) -> str:
     if expected > ZERO and paid >= expected:
          return "paid"
     if paid > ZERO:
          return "partial"
     return "unpaid"


def tenant_payment_status(db: Session, tenant: Tenant, month_start: datetime) -> str:
     paid = rent_paid_by_tenant(db, month_start).get(tenant.id, ZERO)
     return classify_payment_status(paid, expected_rent(tenant))


def has_paid_since(db: Session, tenant_id: int, since: datetime) -> bool:
     """True when the tenant has a paid / partial payment dated on or after since."""
     return (
          db.query(Payment.id)
          .filter(
               Payment.tenant_id == tenant_id,
               Payment.status.in_(COLLECTED_STATUSES),
               Payment.date >= since,
          )
          .first()
          is not None
     )

