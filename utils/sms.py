# utils/sms.py
"""
SMS / WhatsApp transports over the providers' REST APIs.
"""
import requests

TWILIO_MESSAGES_URL = "https://api.twilio.com/2010-04-01/Accounts/{sid}/Messages.json"
AT_LIVE_URL = "https://api.africastalking.com/version1/messaging"
AT_SANDBOX_URL = "https://api.sandbox.africastalking.com/version1/messaging"


def send_twilio_message(account_sid: str, auth_token: str, from_number: str, to_number: str, body: str) -> dict:
     """Send an SMS, or a WhatsApp message when both numbers carry the whatsapp: prefix."""
     response = requests.post(
          TWILIO_MESSAGES_URL.format(sid=account_sid),
          data={"From": from_number, "To": to_number, "Body": body},
          auth=(account_sid, auth_token),
          timeout=10,
     )
     if response.status_code not in (200, 201):
          raise requests.HTTPError(f"Twilio error {response.status_code}: {response.text}", response=response)
     return response.json()


def send_africastalking_sms(username: str, api_key: str, to_number: str, message: str, sender: str = None) -> dict:
     url = AT_SANDBOX_URL if username == "sandbox" else AT_LIVE_URL
     data = {"username": username, "to": to_number, "message": message}
     if sender:
          data["from"] = sender
     response = requests.post(
          url,
          headers={"apiKey": api_key, "Accept": "application/json"},
          data=data,
          timeout=10,
     )
     if response.status_code not in (200, 201):
          raise requests.HTTPError(f"Africa's Talking error {response.status_code}: {response.text}", response=response)
     return response.json()
