# models/__init__.py
from .base import Base
from .user import User, UserRole
from .property import Property
from .unit import Unit, UnitStatus
from .tenant import Tenant, TenantStatus, IdType
from .payment import Payment, PaymentStatus, PaymentMethod, PaymentType
from .reminder import Reminder, ReminderType, ReminderMethod, ReminderFrequency, ReminderStatus
from .expense import Expense
from .settings import Settings
from .activity_log import ActivityLog

__all__ = [
     "Base",
     "User",
     "UserRole",
     "Property",
     "Unit",
     "UnitStatus",
     "Tenant",
     "TenantStatus",
     "IdType",
     "Payment",
     "PaymentStatus",
     "PaymentMethod",
     "PaymentType",
     "Reminder",
     "ReminderType",
     "ReminderMethod",
     "ReminderFrequency",
     "ReminderStatus",
     "Expense",
     "Settings",
     "ActivityLog",
]
