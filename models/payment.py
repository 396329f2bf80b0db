# models/payment.py
import enum
from typing import Optional

from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
from .base import Base


class PaymentStatus(str, enum.Enum):
     """
     Single, lowercase payment status.

     Older clients and the M-Pesa flow used 'Completed' / 'Pending' / 'Failed';
     those spellings are accepted at the API boundary through from_external().
     """
     PENDING = "pending"
     PAID = "paid"
     PARTIAL = "partial"
     OVERDUE = "overdue"
     FAILED = "failed"

     @classmethod
     def from_external(cls, value: str) -> "PaymentStatus":
          """Map any incoming spelling to a PaymentStatus. Raises ValueError if unknown."""
          if isinstance(value, cls):
               return value
          normalized = str(value).strip().lower()
          normalized = _LEGACY_STATUS_ALIASES.get(normalized, normalized)
          return cls(normalized)


_LEGACY_STATUS_ALIASES = {
     "completed": "paid",
     "success": "paid",
     "cancelled": "failed",
}

# Statuses that count as money actually received
COLLECTED_STATUSES = (PaymentStatus.PAID, PaymentStatus.PARTIAL)


class PaymentMethod(str, enum.Enum):
     CASH = "cash"
     BANK = "bank"
     MOBILE_MONEY = "mobile_money"
     LIPA_NA_MPESA = "lipa_na_mpesa"


class PaymentType(str, enum.Enum):
     RENT = "Rent"
     DEPOSIT = "Deposit"
     COMBINED = "Combined"


class Payment(Base):
     """
     Payment model - one rent / deposit transaction attempt.

     Lifecycle: created as 'paid' (manual entry) or 'pending' (M-Pesa STK push).
     A pending payment is moved exactly once by the gateway callback, to 'paid'
     or 'failed', and is not touched again.
     """
     __tablename__ = "payments"

     id = Column(Integer, primary_key=True, autoincrement=True)

     # Foreign keys
     tenant_id = Column(Integer, ForeignKey("tenants.id", ondelete="SET NULL"), nullable=True, index=True)
     unit_id = Column(Integer, ForeignKey("units.id"), nullable=True, index=True)
     user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

     # Amounts
     amount = Column(Numeric(12, 2), nullable=False)
     rent_amount = Column(Numeric(12, 2), default=0, nullable=False)
     deposit_amount = Column(Numeric(12, 2), default=0, nullable=False)

     date = Column(DateTime, server_default=func.now(), nullable=False, index=True)
     method = Column(
          Enum(PaymentMethod, name="payment_method", values_callable=lambda e: [m.value for m in e]),
          nullable=True,
     )
     status = Column(
          Enum(PaymentStatus, name="payment_status", values_callable=lambda e: [m.value for m in e]),
          default=PaymentStatus.PAID,
          nullable=False,
          index=True,
     )
     month_covered = Column(String(20), nullable=True)  # YYYY-MM or 'Deposit'
     type = Column(
          Enum(PaymentType, name="payment_type", values_callable=lambda e: [m.value for m in e]),
          default=PaymentType.RENT,
          nullable=False,
     )

     # External references
     reference = Column(String(100), nullable=True)  # M-Pesa receipt code etc.
     checkout_request_id = Column(String(100), nullable=True, index=True)  # Daraja CheckoutRequestID

     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     tenant = relationship("Tenant", back_populates="payments")
     unit = relationship("Unit")

     def __repr__(self):
          return f"<Payment(id={self.id}, amount={self.amount}, status='{self.status.value}')>"

     @property
     def short_id(self) -> str:
          return f"{self.id:08d}"

     @property
     def tenant_name(self) -> Optional[str]:
          return self.tenant.name if self.tenant else None

     @property
     def tenant_email(self) -> Optional[str]:
          return self.tenant.email if self.tenant else None

     @property
     def unit_number(self) -> Optional[str]:
          return self.unit.unit_number if self.unit else None

     @property
     def is_pending(self) -> bool:
          return self.status == PaymentStatus.PENDING

     def mark_as_paid(self, reference: Optional[str] = None, amount=None) -> None:
          """Mark the payment as paid, optionally confirming receipt code and amount."""
          self.status = PaymentStatus.PAID
          if reference is not None:
               self.reference = reference
          if amount is not None:
               self.amount = amount

     def mark_as_failed(self) -> None:
          """Mark the payment as failed."""
          self.status = PaymentStatus.FAILED
