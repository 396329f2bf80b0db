# routers/payments.py
"""
Payments API.

POST /payments records a manual payment and emails the tenant a receipt in
the background. Receipts can be downloaded as PDF or re-sent on demand.
"""
import logging
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from database import get_session, get_session_context
from dependencies import get_current_user
from models import Payment, Tenant, User
from schemas.payment import PaymentCreate, PaymentResponse
from schemas.settings import SettingsSnapshot
from services.activity_service import log_activity
from services.notification_service import NotificationError
from services.payment_service import list_payments, record_payment
from services.receipt_service import generate_receipt_pdf, send_receipt_email
from services.settings_service import SettingsProvider, get_settings_provider

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/payments", tags=["payments"])


def email_receipt_in_background(payment_id: int, settings: SettingsSnapshot) -> None:
     """BackgroundTasks entry point; uses its own session since the request's is closed."""
     try:
          with get_session_context() as db:
               send_receipt_email(db, payment_id, settings)
     except NotificationError as e:
          logger.error("Receipt email for payment %s failed: %s", payment_id, e)


def _get_payment(db: Session, payment_id: int) -> Payment:
     payment = db.get(Payment, payment_id)
     if not payment:
          raise HTTPException(404, "Payment not found")
     return payment


@router.get("", response_model=List[PaymentResponse])
def get_payments(db: Session = Depends(get_session), user: User = Depends(get_current_user)):
     return list_payments(db)


@router.post("", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
def create_payment(
     body: PaymentCreate,
     background_tasks: BackgroundTasks,
     db: Session = Depends(get_session),
     user: User = Depends(get_current_user),
     provider: SettingsProvider = Depends(get_settings_provider),
):
     tenant = db.get(Tenant, body.tenant_id)
     if not tenant:
          raise HTTPException(404, "Tenant not found")

     try:
          payment = record_payment(db, body, tenant, user)
     except ValueError as e:
          log_activity(db, user, "Record Payment Failed", f"Failed to record payment: {e}", "payment", "error")
          raise HTTPException(400, str(e))

     log_activity(
          db, user, "Record Payment",
          f"Recorded {payment.type.value} payment of {payment.amount} for {tenant.name}",
          "payment",
     )
     background_tasks.add_task(email_receipt_in_background, payment.id, provider.get(db))
     return payment


@router.get("/{payment_id}/pdf")
def get_payment_pdf(
     payment_id: int,
     db: Session = Depends(get_session),
     user: User = Depends(get_current_user),
     provider: SettingsProvider = Depends(get_settings_provider),
):
     payment = _get_payment(db, payment_id)
     pdf_bytes = generate_receipt_pdf(payment, provider.get(db))
     return Response(
          content=pdf_bytes,
          media_type="application/pdf",
          headers={"Content-Disposition": f'inline; filename="Receipt-{payment.short_id}.pdf"'},
     )


@router.post("/{payment_id}/email")
def resend_receipt(
     payment_id: int,
     db: Session = Depends(get_session),
     user: User = Depends(get_current_user),
     provider: SettingsProvider = Depends(get_settings_provider),
):
     _get_payment(db, payment_id)
     try:
          sent = send_receipt_email(db, payment_id, provider.get(db))
     except NotificationError as e:
          logger.error("Resend receipt for payment %s failed: %s", payment_id, e)
          raise HTTPException(500, f"Failed to send email: {e}")
     if not sent:
          raise HTTPException(400, "Tenant has no email address")
     return {"message": "Receipt email sent successfully"}
