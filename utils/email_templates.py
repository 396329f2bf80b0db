# utils/email_templates.py
"""
HTML bodies for outgoing emails.
"""
from html import escape


def _money(value) -> str:
     return f"{float(value or 0):,.2f}"


def otp_email(name: str, otp: str, org_name: str) -> str:
     return f"""
          <h2>Welcome to {escape(org_name)}, {escape(name)}</h2>
          <p>Your verification code is:</p>
          <h1 style="color:#2563eb;letter-spacing:4px">{escape(otp)}</h1>
          <p>This code expires in 10 minutes.</p>
     """


def reminder_email(tenant_name: str, title: str, description: str, due_date, org_name: str) -> str:
     due = due_date.strftime("%d %b %Y") if due_date else ""
     return f"""
          <div style="font-family:Arial,sans-serif;max-width:600px">
               <h2 style="color:#111827">{escape(title)}</h2>
               <p>Dear {escape(tenant_name)},</p>
               <p>{escape(description or "")}</p>
               <p><strong>Due date:</strong> {due}</p>
               <p>Regards,<br>{escape(org_name)}</p>
          </div>
     """


def reminder_text(tenant_name: str, title: str, description: str, org_name: str) -> str:
     text = f"Hi {tenant_name}, {title}"
     if description:
          text += f": {description}"
     return f"{text} - {org_name}"


def receipt_email(payment, org_name: str, currency: str) -> str:
     rows = ""
     if payment.rent_amount and float(payment.rent_amount) > 0:
          rows += f"<tr><td>Rent ({escape(payment.month_covered or '')})</td><td align='right'>{currency} {_money(payment.rent_amount)}</td></tr>"
     if payment.deposit_amount and float(payment.deposit_amount) > 0:
          rows += f"<tr><td>Deposit</td><td align='right'>{currency} {_money(payment.deposit_amount)}</td></tr>"
     method = payment.method.value.replace("_", " ").title() if payment.method else "-"
     return f"""
          <div style="font-family:Arial,sans-serif;max-width:600px">
               <h2>{escape(org_name)}</h2>
               <h3>Payment Receipt #{payment.short_id}</h3>
               <p>Dear {escape(payment.tenant_name or 'Tenant')},</p>
               <p>Thank you for your payment. Details are below and a PDF copy is attached.</p>
               <table width="100%" cellpadding="6" style="border-collapse:collapse">
                    <tr><td>Date</td><td align="right">{payment.date.strftime("%d %b %Y")}</td></tr>
                    <tr><td>Unit</td><td align="right">{escape(payment.unit_number or '-')}</td></tr>
                    <tr><td>Method</td><td align="right">{method}</td></tr>
                    {rows}
                    <tr><td><strong>Total</strong></td><td align="right"><strong>{currency} {_money(payment.amount)}</strong></td></tr>
               </table>
          </div>
     """

