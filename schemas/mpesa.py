# schemas/mpesa.py
"""
Pydantic schemas for M-Pesa STK push and the Daraja callback.

The callback models mirror Safaricom's PascalCase JSON exactly, so they do
not use the camelCase base model.
"""
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import BaseModel, Field, ConfigDict

from .base import CamelModel


class StkPushRequest(CamelModel):
     """Request body for POST /mpesa/stk-push."""

     phone_number: str = Field(..., min_length=9, max_length=20)
     amount: Decimal = Field(..., gt=0)
     account_reference: str = Field(..., min_length=1, max_length=50)
     transaction_desc: Optional[str] = Field(None, max_length=100)
     tenant_id: Optional[int] = None
     unit_id: Optional[int] = None
     payment_id: Optional[int] = Field(None, description="Existing pending payment to correlate")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "phoneNumber": "0712345678",
                    "amount": 15000,
                    "accountReference": "A1",
                    "tenantId": 1,
               }
          }
     )


class StkPushResponse(CamelModel):
     success: bool = True
     message: str
     checkout_request_id: str
     merchant_request_id: Optional[str] = None
     payment_id: Optional[int] = None


class CallbackItem(BaseModel):
     name: str = Field(..., alias="Name")
     value: Any = Field(None, alias="Value")


class CallbackMetadata(BaseModel):
     items: List[CallbackItem] = Field(default_factory=list, alias="Item")


class StkCallback(BaseModel):
     merchant_request_id: Optional[str] = Field(None, alias="MerchantRequestID")
     checkout_request_id: str = Field(..., alias="CheckoutRequestID")
     result_code: int = Field(..., alias="ResultCode")
     result_desc: Optional[str] = Field(None, alias="ResultDesc")
     callback_metadata: Optional[CallbackMetadata] = Field(None, alias="CallbackMetadata")

     def metadata_value(self, name: str) -> Any:
          """Return the Value of the metadata Item called name, or None."""
          if not self.callback_metadata:
               return None
          for item in self.callback_metadata.items:
               if item.name == name:
                    return item.value
          return None


class StkCallbackBody(BaseModel):
     stk_callback: StkCallback = Field(..., alias="stkCallback")


class StkCallbackEnvelope(BaseModel):
     """{"Body": {"stkCallback": {...}}} as POSTed by Safaricom."""
     body: StkCallbackBody = Field(..., alias="Body")
