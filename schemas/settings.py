# schemas/settings.py
"""
Pydantic schemas for the organisation Settings row.

The integrations block is stored as JSON in the database and always
round-trips through these models, so reading code never has to guess at
missing keys: every leaf has a default.

SettingsSnapshot is the frozen, read-only view handed to services by
services.settings_service.SettingsProvider.
"""
from datetime import datetime
from typing import Optional

from pydantic import Field, ConfigDict

from .base import CamelModel


class NotificationToggles(CamelModel):
     email: bool = True
     sms: bool = False
     whatsapp: bool = False
     rent_reminders: bool = True


class SmtpConfig(CamelModel):
     host: str = ""
     port: int = 587
     user: str = ""
     password: str = Field("", alias="pass")
     from_email: str = "noreply@rental.com"


class SendgridConfig(CamelModel):
     api_key: str = ""


class GmailConfig(CamelModel):
     client_id: str = ""
     client_secret: str = ""


class EmailIntegration(CamelModel):
     provider: str = "smtp"  # smtp, sendgrid, gmail
     smtp: SmtpConfig = Field(default_factory=SmtpConfig)
     sendgrid: SendgridConfig = Field(default_factory=SendgridConfig)
     gmail: GmailConfig = Field(default_factory=GmailConfig)


class TwilioSmsConfig(CamelModel):
     account_sid: str = ""
     auth_token: str = ""
     phone_number: str = ""


class AfricasTalkingConfig(CamelModel):
     username: str = ""
     api_key: str = ""


class SmsIntegration(CamelModel):
     enabled: bool = False
     provider: str = "twilio"  # twilio, africastalking
     twilio: TwilioSmsConfig = Field(default_factory=TwilioSmsConfig)
     africastalking: AfricasTalkingConfig = Field(default_factory=AfricasTalkingConfig)


class TwilioWhatsappConfig(CamelModel):
     account_sid: str = ""
     auth_token: str = ""
     from_number: str = ""


class WhatsappIntegration(CamelModel):
     enabled: bool = False
     provider: str = "twilio"
     twilio: TwilioWhatsappConfig = Field(default_factory=TwilioWhatsappConfig)


class MpesaIntegration(CamelModel):
     enabled: bool = False
     environment: str = "sandbox"  # sandbox, production
     paybill: str = ""
     consumer_key: str = ""
     consumer_secret: str = ""
     passkey: str = ""


class Integrations(CamelModel):
     email: EmailIntegration = Field(default_factory=EmailIntegration)
     sms: SmsIntegration = Field(default_factory=SmsIntegration)
     whatsapp: WhatsappIntegration = Field(default_factory=WhatsappIntegration)
     mpesa: MpesaIntegration = Field(default_factory=MpesaIntegration)


class SettingsSnapshot(CamelModel):
     """Immutable view of the Settings row. Also the GET /settings body."""
     model_config = ConfigDict(frozen=True)

     id: Optional[int] = None
     org_name: str = "My Rental Company"
     org_email: Optional[str] = None
     org_phone: Optional[str] = None
     org_address: Optional[str] = None
     tax_id: Optional[str] = None
     currency: str = "USD"
     timezone: str = "UTC"
     notifications: NotificationToggles = Field(default_factory=NotificationToggles)
     integrations: Integrations = Field(default_factory=Integrations)
     updated_at: Optional[datetime] = None


class SettingsUpdate(CamelModel):
     """PUT /settings body. Nested blocks replace the stored block wholesale."""
     org_name: Optional[str] = Field(None, min_length=1, max_length=255)
     org_email: Optional[str] = None
     org_phone: Optional[str] = None
     org_address: Optional[str] = None
     tax_id: Optional[str] = None
     currency: Optional[str] = Field(None, max_length=10)
     timezone: Optional[str] = Field(None, max_length=64)
     notifications: Optional[NotificationToggles] = None
     integrations: Optional[Integrations] = None


class SmtpTestRequest(CamelModel):
     host: str = Field(..., min_length=1)
     port: int = 587
     user: str = Field(..., min_length=1)
     password: str = Field(..., alias="pass")
