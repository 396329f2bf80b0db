# services/receipt_service.py
"""
Receipt Service - payment receipt PDF (fpdf2) and the receipt email.
"""
import logging
from typing import Optional

from fpdf import FPDF
from fpdf.enums import XPos, YPos
from sqlalchemy.orm import Session

from models import Payment
from schemas.settings import SettingsSnapshot
from services.notification_service import Notifier
from utils.email import Attachment
from utils.email_templates import receipt_email

logger = logging.getLogger(__name__)

FONT = "Helvetica"


def _text(value) -> str:
     # Core PDF fonts only cover latin-1
     return str(value if value is not None else "").encode("latin-1", "replace").decode("latin-1")


def _money(currency: str, value) -> str:
     return f"{currency} {float(value or 0):,.2f}"


def _label_value(pdf: FPDF, label: str, value: str) -> None:
     pdf.set_font(FONT, "B", 10)
     pdf.cell(40, 7, text=_text(label))
     pdf.set_font(FONT, "", 10)
     pdf.cell(0, 7, text=_text(value), new_x=XPos.LMARGIN, new_y=YPos.NEXT)


def generate_receipt_pdf(payment: Payment, settings: SettingsSnapshot) -> bytes:
     """Render a one-page A4 receipt and return the PDF bytes."""
     currency = settings.currency
     pdf = FPDF(format="A4")
     pdf.set_auto_page_break(auto=False)
     pdf.add_page()

     # Watermark
     status_label = payment.status.value.upper()
     pdf.set_font(FONT, "B", 60)
     pdf.set_text_color(235, 235, 235)
     with pdf.rotation(45, x=105, y=150):
          pdf.text(45, 170, _text(status_label))
     pdf.set_text_color(0, 0, 0)

     # Business header
     pdf.set_xy(15, 15)
     pdf.set_font(FONT, "B", 18)
     pdf.cell(0, 9, text=_text(settings.org_name), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
     pdf.set_font(FONT, "", 9)
     for line in (settings.org_address, settings.org_phone, settings.org_email):
          if line:
               pdf.cell(0, 5, text=_text(line), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
     if settings.tax_id:
          pdf.cell(0, 5, text=_text(f"Tax ID: {settings.tax_id}"), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

     # Title
     pdf.ln(6)
     pdf.set_font(FONT, "B", 16)
     pdf.cell(0, 10, text="PAYMENT RECEIPT", align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
     pdf.set_font(FONT, "", 10)
     pdf.cell(0, 6, text=_text(f"Receipt #{payment.short_id}"), align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
     pdf.ln(6)

     # Billed to
     pdf.set_font(FONT, "B", 11)
     pdf.cell(0, 7, text="BILLED TO", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
     _label_value(pdf, "Tenant", payment.tenant_name or "-")
     _label_value(pdf, "Email", payment.tenant_email or "-")
     _label_value(pdf, "Unit", payment.unit_number or "-")
     pdf.ln(4)

     # Payment details
     pdf.set_font(FONT, "B", 11)
     pdf.cell(0, 7, text="PAYMENT DETAILS", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
     _label_value(pdf, "Date", payment.date.strftime("%d %b %Y"))
     _label_value(pdf, "Method", payment.method.value.replace("_", " ").title() if payment.method else "-")
     _label_value(pdf, "Status", status_label)
     if payment.reference:
          _label_value(pdf, "Reference", payment.reference)
     if payment.month_covered:
          _label_value(pdf, "Period", payment.month_covered)
     pdf.ln(4)

     # Amount box
     pdf.set_fill_color(243, 244, 246)
     pdf.set_font(FONT, "", 10)
     if payment.rent_amount and float(payment.rent_amount) > 0:
          pdf.cell(120, 8, text="Rent", border=1, fill=True)
          pdf.cell(0, 8, text=_text(_money(currency, payment.rent_amount)), border=1, align="R", fill=True,
                   new_x=XPos.LMARGIN, new_y=YPos.NEXT)
     if payment.deposit_amount and float(payment.deposit_amount) > 0:
          pdf.cell(120, 8, text="Deposit", border=1, fill=True)
          pdf.cell(0, 8, text=_text(_money(currency, payment.deposit_amount)), border=1, align="R", fill=True,
                   new_x=XPos.LMARGIN, new_y=YPos.NEXT)
     pdf.set_font(FONT, "B", 12)
     pdf.cell(120, 10, text="TOTAL", border=1)
     pdf.cell(0, 10, text=_text(_money(currency, payment.amount)), border=1, align="R",
              new_x=XPos.LMARGIN, new_y=YPos.NEXT)

     # Footer
     pdf.set_xy(15, 270)
     pdf.set_font(FONT, "I", 8)
     pdf.set_text_color(120, 120, 120)
     pdf.cell(0, 5, text=_text(f"Thank you for your payment. Generated by {settings.org_name}."), align="C")

     return bytes(pdf.output())


def send_receipt_email(db: Session, payment_id: int, settings: SettingsSnapshot, notifier: Optional[Notifier] = None) -> bool:
     """
     Email the receipt (HTML body plus PDF) to the payment's tenant.

     Returns False when there is nothing to send (unknown payment or tenant
     without an email). Delivery errors propagate.
     """
     payment = db.get(Payment, payment_id)
     if payment is None:
          logger.warning("Receipt requested for unknown payment %s", payment_id)
          return False
     if not payment.tenant_email:
          logger.info("Payment %s has no tenant email; receipt not sent", payment_id)
          return False

     notifier = notifier or Notifier(settings)
     pdf_bytes = generate_receipt_pdf(payment, settings)
     notifier.send_email(
          payment.tenant_email,
          f"Payment Receipt #{payment.short_id} - {settings.org_name}",
          receipt_email(payment, settings.org_name, settings.currency),
          attachments=[Attachment(f"receipt-{payment.short_id}.pdf", pdf_bytes)],
     )
     return True
