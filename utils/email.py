# utils/email.py
"""
Low-level email transports: the SendGrid HTTP API and plain SMTP.

services.notification_service decides which of these to try and in what
order; the functions here just send one message or raise.
"""
import base64
import smtplib
from email.message import EmailMessage
from email.utils import formataddr
from typing import NamedTuple, Optional, Sequence

import requests

import config

SENDGRID_URL = "https://api.sendgrid.com/v3/mail/send"


class Attachment(NamedTuple):
     filename: str
     content: bytes
     mime_type: str = "application/pdf"


def send_sendgrid_email(
     api_key: str,
     from_email: str,
     to_email: str,
     subject: str,
     html: str,
     attachments: Sequence[Attachment] = (),
     from_name: Optional[str] = None,
):
     payload = {
          "personalizations": [{"to": [{"email": to_email}]}],
          "from": {"email": from_email, "name": from_name or config.FROM_NAME},
          "subject": subject,
          "content": [{"type": "text/html", "value": html}],
     }
     if attachments:
          payload["attachments"] = [
               {
                    "content": base64.b64encode(att.content).decode("ascii"),
                    "filename": att.filename,
                    "type": att.mime_type,
                    "disposition": "attachment",
               }
               for att in attachments
          ]

     response = requests.post(
          SENDGRID_URL,
          headers={
               "Authorization": f"Bearer {api_key}",
               "Content-Type": "application/json",
          },
          json=payload,
          timeout=10,
     )
     if response.status_code not in (200, 202):
          raise requests.HTTPError(f"SendGrid error {response.status_code}: {response.text}", response=response)


def open_smtp(host: str, port: int, user: Optional[str], password: Optional[str]) -> smtplib.SMTP:
     """Connect (SSL on 465, STARTTLS otherwise) and log in when credentials are given."""
     port = int(port)
     if port == 465:
          server = smtplib.SMTP_SSL(host, port, timeout=config.SMTP_TIMEOUT)
     else:
          server = smtplib.SMTP(host, port, timeout=config.SMTP_TIMEOUT)
          server.starttls()
     if user:
          server.login(user, password or "")
     return server


def build_message(
     from_email: str,
     to_email: str,
     subject: str,
     html: str,
     attachments: Sequence[Attachment] = (),
     from_name: Optional[str] = None,
) -> EmailMessage:
     msg = EmailMessage()
     msg["Subject"] = subject
     msg["From"] = formataddr((from_name or config.FROM_NAME, from_email))
     msg["To"] = to_email
     msg.set_content("This message is best viewed in an HTML capable email client.")
     msg.add_alternative(html, subtype="html")
     for att in attachments:
          maintype, _, subtype = att.mime_type.partition("/")
          msg.add_attachment(att.content, maintype=maintype, subtype=subtype or "octet-stream", filename=att.filename)
     return msg


def send_smtp_email(
     host: str,
     port: int,
     user: Optional[str],
     password: Optional[str],
     from_email: str,
     to_email: str,
     subject: str,
     html: str,
     attachments: Sequence[Attachment] = (),
):
     msg = build_message(from_email, to_email, subject, html, attachments)
     server = open_smtp(host, port, user, password)
     try:
          server.send_message(msg)
     finally:
          server.quit()
