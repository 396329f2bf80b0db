# config.py
"""
Application configuration loaded from the environment.

Values come from process environment variables, with a local .env file
loaded first. Integration credentials that users edit at runtime (SMTP,
SMS, M-Pesa) are NOT here; they live in the Settings table and are served
by services.settings_service.SettingsProvider. The SMTP / SendGrid /
Africa's Talking values below are only fallbacks.
"""
import os

from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str) -> bool:
     return str(value).strip().lower() in ("1", "true", "yes", "on")


APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
PORT = int(os.getenv("PORT", "5000"))

CORS_ORIGINS = [
     origin.strip()
     for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")
     if origin.strip()
]

# Auth
JWT_SECRET = os.getenv("JWT_SECRET", "change-me")
JWT_ALGORITHM = "HS256"
JWT_EXPIRE_DAYS = int(os.getenv("JWT_EXPIRE_DAYS", "30"))
OTP_TTL_MINUTES = 10

# M-Pesa
MPESA_CALLBACK_URL = os.getenv("MPESA_CALLBACK_URL", "https://your-domain.com/api/mpesa/callback")
MPESA_HTTP_TIMEOUT = int(os.getenv("MPESA_HTTP_TIMEOUT", "30"))

# Settings cache / reminder scheduler
SETTINGS_CACHE_TTL = int(os.getenv("SETTINGS_CACHE_TTL", "60"))
REMINDER_INTERVAL_SECONDS = int(os.getenv("REMINDER_INTERVAL_SECONDS", "60"))
REMINDER_SCHEDULER_ENABLED = _as_bool(os.getenv("REMINDER_SCHEDULER_ENABLED", "true"))

# Env fallbacks for notifications
SMTP_HOST = os.getenv("SMTP_HOST")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USER = os.getenv("SMTP_USER")
SMTP_PASS = os.getenv("SMTP_PASS")
SENDGRID_API_KEY = os.getenv("SENDGRID_API_KEY")
FROM_EMAIL = os.getenv("FROM_EMAIL", "noreply@rental.com")
FROM_NAME = os.getenv("FROM_NAME", "Rental Manager")
SMTP_TIMEOUT = 10
AT_USERNAME = os.getenv("AT_USERNAME")
AT_API_KEY = os.getenv("AT_API_KEY")
AT_FROM = os.getenv("AT_FROM")

# KRA (rental income tax filing)
KRA_CLIENT_ID = os.getenv("KRA_CLIENT_ID")
KRA_CLIENT_SECRET = os.getenv("KRA_CLIENT_SECRET")
KRA_TOKEN_URL = os.getenv("KRA_TOKEN_URL", "https://sbx.kra.go.ke/oauth2/token")
KRA_API_BASE = os.getenv("KRA_API_BASE", "https://sbx.kra.go.ke")
KRA_MRI_RATE = 0.075
