# routers/mpesa.py
"""
M-Pesa (Daraja) endpoints.

POST /api/mpesa/stk-push   - authenticated; prompts the payer's phone
POST /api/mpesa/callback   - public webhook called by Safaricom
"""
import logging

from fastapi import APIRouter, BackgroundTasks, Body, Depends, HTTPException
from sqlalchemy.orm import Session

import config
from database import get_session
from dependencies import get_current_user
from models import Payment, PaymentStatus, Tenant, User
from routers.payments import email_receipt_in_background
from schemas.mpesa import StkPushRequest, StkPushResponse
from services.activity_service import log_activity
from services.mpesa_service import (
     OUTCOME_PAID,
     DarajaClient,
     MpesaConfig,
     MpesaError,
     reconcile_stk_callback,
)
from services.payment_service import create_pending_mpesa_payment
from services.settings_service import SettingsProvider, get_settings_provider

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/mpesa", tags=["mpesa"])


def get_daraja_client(
     db: Session = Depends(get_session),
     provider: SettingsProvider = Depends(get_settings_provider),
) -> DarajaClient:
     try:
          return DarajaClient(MpesaConfig.from_settings(provider.get(db)))
     except MpesaError as e:
          raise HTTPException(500, str(e))


@router.post("/stk-push", response_model=StkPushResponse)
def stk_push(
     body: StkPushRequest,
     db: Session = Depends(get_session),
     user: User = Depends(get_current_user),
     client: DarajaClient = Depends(get_daraja_client),
):
     payment = None
     tenant = None
     if body.payment_id is not None:
          payment = db.get(Payment, body.payment_id)
          if payment is None:
               raise HTTPException(404, "Payment not found")
          # Settled payments are never reopened by a new push
          if payment.status != PaymentStatus.PENDING:
               raise HTTPException(400, f"Payment is already {payment.status.value}")
     else:
          if body.tenant_id is None:
               raise HTTPException(400, "tenantId or paymentId is required")
          tenant = db.get(Tenant, body.tenant_id)
          if tenant is None:
               raise HTTPException(404, "Tenant not found")

     try:
          result = client.stk_push(
               body.phone_number,
               body.amount,
               body.account_reference,
               callback_url=config.MPESA_CALLBACK_URL,
               transaction_desc=body.transaction_desc or "Rent Payment",
          )
     except MpesaError as e:
          log_activity(db, user, "M-Pesa Payment Failed", str(e), "payment", "error")
          raise HTTPException(500, str(e))

     if payment is not None:
          payment.checkout_request_id = result.checkout_request_id
          db.commit()
     else:
          payment = create_pending_mpesa_payment(
               db, tenant, body.amount, result.checkout_request_id, unit_id=body.unit_id, user=user,
          )

     log_activity(
          db, user, "M-Pesa Payment Initiated",
          f"STK Push sent to {body.phone_number} for {body.amount}",
          "payment", "info",
     )
     return StkPushResponse(
          success=True,
          message="STK Push initiated successfully",
          checkout_request_id=result.checkout_request_id,
          merchant_request_id=result.merchant_request_id,
          payment_id=payment.id,
     )


@router.post("/callback")
def mpesa_callback(
     background_tasks: BackgroundTasks,
     payload: dict = Body(...),
     db: Session = Depends(get_session),
     provider: SettingsProvider = Depends(get_settings_provider),
):
     """
     Receives the STK push result from Safaricom.

     Always answers {"result": "success"} for a well-formed callback, even
     when the payment is unknown or was already settled, so Safaricom stops
     retrying.
     """
     logger.info("M-Pesa callback received")
     try:
          outcome = reconcile_stk_callback(db, payload)
     except ValueError as e:
          logger.warning("Rejected M-Pesa callback: %s", e)
          raise HTTPException(400, str(e))

     if outcome == OUTCOME_PAID:
          checkout_id = payload["Body"]["stkCallback"]["CheckoutRequestID"]
          payment = db.query(Payment).filter(Payment.checkout_request_id == checkout_id).first()
          log_activity(db, "System", "M-Pesa Payment Received", f"Payment {payment.id} confirmed ({payment.reference})", "payment")
          background_tasks.add_task(email_receipt_in_background, payment.id, provider.get(db))
     return {"result": "success"}
