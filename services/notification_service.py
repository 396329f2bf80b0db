# services/notification_service.py
"""
Notification Service - email, SMS and WhatsApp delivery.

A Notifier is built from a SettingsSnapshot. Email walks a chain of
providers and stops at the first that succeeds:

     1. SendGrid from settings (when it is the selected provider)
     2. SMTP from settings (unless the host is a placeholder)
     3. SMTP from the environment
     4. SendGrid from the environment

When nothing is configured the message is only logged. When something was
configured and every attempt failed, NotificationError is raised.

SMS tries the provider selected in settings, then Africa's Talking from the
environment. SMS and WhatsApp never raise: failures are logged and reported
through the returned channel name.
"""
import logging
import smtplib
from typing import Callable, List, Optional, Sequence, Tuple

import requests

import config
from schemas.settings import SettingsSnapshot
from utils.email import Attachment, send_sendgrid_email, send_smtp_email, open_smtp
from utils.phone import to_e164
from utils.sms import send_twilio_message, send_africastalking_sms

logger = logging.getLogger(__name__)

_PLACEHOLDER_SMTP_HOSTS = ("example.com", "mailtrap")

# Errors a single email provider may raise; anything else propagates
_TRANSPORT_ERRORS = (requests.RequestException, smtplib.SMTPException, OSError)


class NotificationError(Exception):
     """Every configured email provider failed."""


def _is_placeholder_host(host: str) -> bool:
     host = (host or "").lower()
     return any(marker in host for marker in _PLACEHOLDER_SMTP_HOSTS)


def verify_smtp(host: str, port: int, user: str, password: str) -> None:
     """Connect and log in to an SMTP server. Raises on failure."""
     server = open_smtp(host, port, user, password)
     server.quit()


class Notifier:
     def __init__(self, settings: SettingsSnapshot):
          self.settings = settings

     @property
     def org_name(self) -> str:
          return self.settings.org_name

     def _email_senders(self) -> List[Tuple[str, Callable]]:
          email_cfg = self.settings.integrations.email
          smtp_cfg = email_cfg.smtp
          from_email = smtp_cfg.from_email or config.FROM_EMAIL
          senders = []

          if email_cfg.provider == "sendgrid" and email_cfg.sendgrid.api_key:
               senders.append((
                    "sendgrid",
                    lambda to, subject, html, atts: send_sendgrid_email(
                         email_cfg.sendgrid.api_key, from_email, to, subject, html, atts, from_name=self.org_name,
                    ),
               ))
          if smtp_cfg.host and not _is_placeholder_host(smtp_cfg.host):
               senders.append((
                    "smtp",
                    lambda to, subject, html, atts: send_smtp_email(
                         smtp_cfg.host, smtp_cfg.port, smtp_cfg.user, smtp_cfg.password,
                         from_email, to, subject, html, atts,
                    ),
               ))
          if config.SMTP_HOST and config.SMTP_USER:
               senders.append((
                    "env-smtp",
                    lambda to, subject, html, atts: send_smtp_email(
                         config.SMTP_HOST, config.SMTP_PORT, config.SMTP_USER, config.SMTP_PASS,
                         config.FROM_EMAIL, to, subject, html, atts,
                    ),
               ))
          if config.SENDGRID_API_KEY:
               senders.append((
                    "env-sendgrid",
                    lambda to, subject, html, atts: send_sendgrid_email(
                         config.SENDGRID_API_KEY, config.FROM_EMAIL, to, subject, html, atts,
                    ),
               ))
          return senders

     def send_email(self, to: str, subject: str, html: str, attachments: Optional[Sequence[Attachment]] = None) -> str:
          """
          Send an email and return the name of the provider that delivered it
          ('simulated' when none is configured).

          Raises:
               NotificationError: providers were configured and all of them failed
          """
          if not to:
               logger.warning("Email '%s' skipped: no recipient", subject)
               return "skipped"

          senders = self._email_senders()
          if not senders:
               logger.info("[simulated email] to=%s subject=%s", to, subject)
               return "simulated"

          errors = []
          for name, sender in senders:
               try:
                    sender(to, subject, html, list(attachments or ()))
               except _TRANSPORT_ERRORS as e:
                    logger.warning("Email via %s to %s failed: %s", name, to, e)
                    errors.append(f"{name}: {e}")
                    continue
               logger.info("Email '%s' sent to %s via %s", subject, to, name)
               return name

          raise NotificationError(f"All methods failed. Errors: {errors}")

     def _sms_senders(self) -> List[Tuple[str, Callable]]:
          sms = self.settings.integrations.sms
          twilio = sms.twilio
          at = sms.africastalking
          senders = []

          if sms.enabled and sms.provider == "twilio" and twilio.account_sid and twilio.auth_token and twilio.phone_number:
               senders.append((
                    "twilio",
                    lambda to, message: send_twilio_message(
                         twilio.account_sid, twilio.auth_token, twilio.phone_number, to, message,
                    ),
               ))
          if sms.enabled and sms.provider == "africastalking" and at.username and at.api_key:
               senders.append((
                    "africastalking",
                    lambda to, message: send_africastalking_sms(at.username, at.api_key, to, message),
               ))
          if config.AT_USERNAME and config.AT_API_KEY:
               senders.append((
                    "env-africastalking",
                    lambda to, message: send_africastalking_sms(
                         config.AT_USERNAME, config.AT_API_KEY, to, message, sender=config.AT_FROM,
                    ),
               ))
          return senders

     def send_sms(self, phone: str, message: str) -> str:
          """
          Send an SMS; returns the provider used, 'failed', 'skipped' or 'simulated'.

          The settings provider is tried first and the environment's Africa's
          Talking account takes over when it is absent or fails.
          """
          if not phone or not message:
               logger.warning("SMS skipped: phone or message missing")
               return "skipped"

          to_number = to_e164(phone)
          senders = self._sms_senders()
          if not senders:
               logger.info("[simulated sms] to=%s message=%s", to_number, message)
               return "simulated"

          for name, sender in senders:
               try:
                    sender(to_number, message)
               except requests.RequestException as e:
                    logger.warning("SMS via %s to %s failed: %s", name, to_number, e)
                    continue
               logger.info("SMS sent to %s via %s", to_number, name)
               return name

          logger.error("SMS to %s failed on every provider", to_number)
          return "failed"

     def send_whatsapp(self, phone: str, message: str) -> str:
          if not phone or not message:
               logger.warning("WhatsApp skipped: phone or message missing")
               return "skipped"

          whatsapp = self.settings.integrations.whatsapp
          to_number = to_e164(phone)
          twilio = whatsapp.twilio
          if not (whatsapp.enabled and twilio.account_sid and twilio.auth_token and twilio.from_number):
               logger.info("[simulated whatsapp] to=%s message=%s", to_number, message)
               return "simulated"

          from_number = twilio.from_number
          if not from_number.startswith("whatsapp:"):
               from_number = f"whatsapp:{from_number}"
          try:
               send_twilio_message(twilio.account_sid, twilio.auth_token, from_number, f"whatsapp:{to_number}", message)
          except requests.RequestException as e:
               logger.error("WhatsApp to %s failed: %s", to_number, e)
               return "failed"
          logger.info("WhatsApp sent to %s", to_number)
          return "twilio"
