# services/mpesa_service.py
"""
M-Pesa Service - Safaricom Daraja STK push and callback reconciliation.

Flow:
1. POST /api/mpesa/stk-push asks Daraja to prompt the tenant's phone and
   stores the returned CheckoutRequestID on a pending Payment.
2. Safaricom later POSTs the outcome to /api/mpesa/callback.
   reconcile_stk_callback() moves that pending payment to paid or failed.

A payment leaves 'pending' exactly once. Safaricom retries callbacks, so a
second callback for a payment that is no longer pending is ignored.
"""
import base64
import logging
import math
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

import requests
from pydantic import ValidationError
from sqlalchemy.orm import Session

import config
from models import Payment
from schemas.mpesa import StkCallbackEnvelope
from schemas.settings import SettingsSnapshot
from utils.phone import normalize_phone

logger = logging.getLogger(__name__)

SANDBOX_URL = "https://sandbox.safaricom.co.ke"
PRODUCTION_URL = "https://api.safaricom.co.ke"

# Reconciliation outcomes
OUTCOME_PAID = "paid"
OUTCOME_FAILED = "failed"
OUTCOME_NOT_FOUND = "not_found"
OUTCOME_DUPLICATE = "duplicate"

__all__ = [
     "MpesaError",
     "MpesaConfig",
     "DarajaClient",
     "StkPushResult",
     "make_timestamp",
     "make_password",
     "normalize_phone",
     "reconcile_stk_callback",
]


class MpesaError(Exception):
     """Configuration or gateway failure; the message is shown to the user."""


def make_timestamp(now: Optional[datetime] = None) -> str:
     return (now or datetime.now()).strftime("%Y%m%d%H%M%S")


def make_password(shortcode: str, passkey: str, timestamp: str) -> str:
     return base64.b64encode(f"{shortcode}{passkey}{timestamp}".encode()).decode()


@dataclass(frozen=True)
class MpesaConfig:
     consumer_key: str
     consumer_secret: str
     passkey: str
     shortcode: str
     environment: str = "sandbox"

     @property
     def base_url(self) -> str:
          return SANDBOX_URL if self.environment == "sandbox" else PRODUCTION_URL

     @classmethod
     def from_settings(cls, settings: SettingsSnapshot) -> "MpesaConfig":
          mpesa = settings.integrations.mpesa
          if not mpesa.enabled:
               raise MpesaError("M-Pesa integration is not enabled in settings.")
          if not (mpesa.consumer_key and mpesa.consumer_secret and mpesa.passkey and mpesa.paybill):
               raise MpesaError("Missing M-Pesa configuration keys.")
          return cls(
               consumer_key=mpesa.consumer_key,
               consumer_secret=mpesa.consumer_secret,
               passkey=mpesa.passkey,
               shortcode=mpesa.paybill,
               environment=mpesa.environment,
          )


@dataclass(frozen=True)
class StkPushResult:
     checkout_request_id: str
     merchant_request_id: Optional[str]
     customer_message: Optional[str] = None


class DarajaClient:
     """Thin Daraja API client. Every call is a single attempt; no retries."""

     def __init__(self, mpesa_config: MpesaConfig, session: Optional[requests.Session] = None):
          self.config = mpesa_config
          self.http = session or requests.Session()

     def get_access_token(self) -> str:
          try:
               response = self.http.get(
                    f"{self.config.base_url}/oauth/v1/generate",
                    params={"grant_type": "client_credentials"},
                    auth=(self.config.consumer_key, self.config.consumer_secret),
                    timeout=config.MPESA_HTTP_TIMEOUT,
               )
               response.raise_for_status()
               token = response.json().get("access_token")
          except (requests.RequestException, ValueError) as e:
               logger.error("M-Pesa token request failed: %s", e)
               raise MpesaError("Failed to generate M-Pesa token.") from e
          if not token:
               raise MpesaError("Failed to generate M-Pesa token.")
          return token

     def stk_push(
          self,
          phone: str,
          amount,
          account_reference: str,
          callback_url: str = config.MPESA_CALLBACK_URL,
          transaction_desc: str = "Rent Payment",
          now: Optional[datetime] = None,
     ) -> StkPushResult:
          token = self.get_access_token()
          timestamp = make_timestamp(now)
          msisdn = normalize_phone(phone)
          payload = {
               "BusinessShortCode": self.config.shortcode,
               "Password": make_password(self.config.shortcode, self.config.passkey, timestamp),
               "Timestamp": timestamp,
               "TransactionType": "CustomerPayBillOnline",
               "Amount": math.ceil(float(amount)),
               "PartyA": msisdn,
               "PartyB": self.config.shortcode,
               "PhoneNumber": msisdn,
               "CallBackURL": callback_url,
               "AccountReference": account_reference,
               "TransactionDesc": transaction_desc,
          }

          try:
               response = self.http.post(
                    f"{self.config.base_url}/mpesa/stkpush/v1/processrequest",
                    json=payload,
                    headers={"Authorization": f"Bearer {token}"},
                    timeout=config.MPESA_HTTP_TIMEOUT,
               )
          except requests.RequestException as e:
               logger.error("STK push request failed: %s", e)
               raise MpesaError(f"STK push request failed: {e}") from e

          try:
               data = response.json()
          except ValueError:
               data = {}

          if response.status_code != 200 or not data.get("CheckoutRequestID"):
               message = data.get("errorMessage") or data.get("ResponseDescription") or response.text
               logger.error("STK push rejected (%s): %s", response.status_code, message)
               raise MpesaError(message or "STK push failed")

          logger.info("STK push sent to %s, CheckoutRequestID=%s", msisdn, data["CheckoutRequestID"])
          return StkPushResult(
               checkout_request_id=data["CheckoutRequestID"],
               merchant_request_id=data.get("MerchantRequestID"),
               customer_message=data.get("CustomerMessage"),
          )


def reconcile_stk_callback(db: Session, payload: dict) -> str:
     """
     Apply a Daraja STK callback to its pending payment.

     ResultCode 0 marks it paid with the receipt number and confirmed amount;
     any other code marks it failed and changes nothing else.

     Returns one of 'paid', 'failed', 'not_found', 'duplicate'.

     Raises:
          ValueError: payload is not a Daraja STK callback
     """
     try:
          callback = StkCallbackEnvelope.model_validate(payload).body.stk_callback
     except ValidationError as e:
          raise ValueError("Malformed M-Pesa callback payload") from e

     payment = (
          db.query(Payment)
          .filter(Payment.checkout_request_id == callback.checkout_request_id)
          .with_for_update()
          .first()
     )
     if payment is None:
          logger.warning("M-Pesa callback for unknown CheckoutRequestID %s", callback.checkout_request_id)
          return OUTCOME_NOT_FOUND

     if not payment.is_pending:
          logger.info(
               "Ignoring repeated M-Pesa callback for payment %s (already %s)",
               payment.id, payment.status.value,
          )
          return OUTCOME_DUPLICATE

     if callback.result_code == 0:
          receipt = callback.metadata_value("MpesaReceiptNumber")
          amount = callback.metadata_value("Amount")
          payment.mark_as_paid(
               reference=str(receipt) if receipt is not None else None,
               amount=Decimal(str(amount)) if amount is not None else None,
          )
          outcome = OUTCOME_PAID
     else:
          payment.mark_as_failed()
          outcome = OUTCOME_FAILED

     db.commit()
     logger.info(
          "M-Pesa callback %s: payment %s -> %s (%s)",
          callback.checkout_request_id, payment.id, outcome, callback.result_desc,
     )
     return outcome
