# schemas/__init__.py
"""
Pydantic request / response schemas, one module per API resource.
"""
from .base import CamelModel, MessageResponse
from .auth import (
     RegisterRequest,
     RegisterResponse,
     VerifyEmailRequest,
     LoginRequest,
     AuthResponse,
     UserResponse,
)
from .property import PropertyCreate, PropertyUpdate, PropertyResponse
from .unit import UnitCreate, UnitUpdate, UnitResponse
from .tenant import TenantCreate, TenantUpdate, TenantResponse
from .payment import PaymentCreate, PaymentResponse
from .mpesa import StkPushRequest, StkPushResponse, StkCallbackEnvelope
from .reminder import ReminderCreate, ReminderResponse
from .expense import ExpenseCreate, ExpenseResponse
from .activity import ActivityLogResponse
from .settings import SettingsSnapshot, SettingsUpdate, SmtpTestRequest
from .reports import (
     DashboardStats,
     ReportsResponse,
     KraTaxReport,
     KraFileReturnRequest,
     KraFileReturnResponse,
)

__all__ = [
     "CamelModel",
     "MessageResponse",
     "RegisterRequest",
     "RegisterResponse",
     "VerifyEmailRequest",
     "LoginRequest",
     "AuthResponse",
     "UserResponse",
     "PropertyCreate",
     "PropertyUpdate",
     "PropertyResponse",
     "UnitCreate",
     "UnitUpdate",
     "UnitResponse",
     "TenantCreate",
     "TenantUpdate",
     "TenantResponse",
     "PaymentCreate",
     "PaymentResponse",
     "StkPushRequest",
     "StkPushResponse",
     "StkCallbackEnvelope",
     "ReminderCreate",
     "ReminderResponse",
     "ExpenseCreate",
     "ExpenseResponse",
     "ActivityLogResponse",
     "SettingsSnapshot",
     "SettingsUpdate",
     "SmtpTestRequest",
     "DashboardStats",
     "ReportsResponse",
     "KraTaxReport",
     "KraFileReturnRequest",
     "KraFileReturnResponse",
]
