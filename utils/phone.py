# utils/phone.py
import re


def normalize_phone(raw) -> str:
     """
     Normalise a Kenyan phone number to 2547XXXXXXXX / 2541XXXXXXXX.

     Non-digits are stripped; a leading 0 becomes 254 and a bare 7... or
     1... number gets 254 prepended. Anything else is returned as digits.
     """
     digits = re.sub(r"\D", "", str(raw or ""))
     if digits.startswith("0"):
          return "254" + digits[1:]
     if digits.startswith("7") or digits.startswith("1"):
          return "254" + digits
     return digits


def to_e164(raw) -> str:
     """+254... form expected by Twilio and Africa's Talking."""
     value = str(raw or "").strip()
     if value.startswith("+"):
          return "+" + re.sub(r"\D", "", value)
     return "+" + normalize_phone(value)
