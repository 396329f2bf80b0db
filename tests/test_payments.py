from datetime import datetime
from decimal import Decimal

import pytest

from models import Payment, PaymentStatus, PaymentType
from services.notification_service import NotificationError
from services.payment_service import classify_payment_status, has_paid_since, split_amounts


@pytest.mark.parametrize(
    "rent, deposit, expected_type",
    [
        ("15000", "0", PaymentType.RENT),
        ("0", "30000", PaymentType.DEPOSIT),
        ("15000", "30000", PaymentType.COMBINED),
        ("15000", None, PaymentType.RENT),
        ("-50", "2000", PaymentType.DEPOSIT),
    ],
)
def test_split_amounts_sums_parts_and_picks_type(rent, deposit, expected_type):
    rent_amount, deposit_amount, total, payment_type = split_amounts(rent, deposit)
    assert total == rent_amount + deposit_amount
    assert payment_type == expected_type


def test_split_amounts_rejects_zero_total():
    with pytest.raises(ValueError, match="No payment amount provided"):
        split_amounts("0", "")


def test_classify_payment_status():
    assert classify_payment_status(Decimal("15000"), Decimal("15000")) == "paid"
    assert classify_payment_status(Decimal("100"), Decimal("15000")) == "partial"
    assert classify_payment_status(Decimal("0"), Decimal("15000")) == "unpaid"
    # Nothing expected and nothing paid is still unpaid
    assert classify_payment_status(Decimal("0"), Decimal("0")) == "unpaid"


def test_record_combined_payment(client, db, auth_headers, make_unit, make_tenant):
    tenant = make_tenant(unit=make_unit())
    response = client.post(
        "/api/payments",
        json={
            "tenantId": tenant.id,
            "rentAmount": 15000,
            "depositAmount": 30000,
            "monthCovered": "2026-10",
            "nextPaymentDate": "2026-11-05",
        },
        headers=auth_headers,
    )
    assert response.status_code == 201
    body = response.json()
    assert float(body["amount"]) == 45000
    assert body["type"] == "Combined"
    assert body["status"] == "paid"
    assert body["method"] == "cash"
    assert body["monthCovered"] == "2026-10"
    assert body["unitNumber"] == "A1"

    db.refresh(tenant)
    assert tenant.next_payment_date.isoformat() == "2026-11-05"


def test_deposit_only_payment_covers_deposit(client, auth_headers, make_tenant):
    tenant = make_tenant()
    response = client.post(
        "/api/payments",
        json={"tenantId": tenant.id, "rentAmount": "", "depositAmount": 20000},
        headers=auth_headers,
    )
    assert response.status_code == 201
    assert response.json()["type"] == "Deposit"
    assert response.json()["monthCovered"] == "Deposit"


def test_zero_payment_is_rejected(client, db, auth_headers, make_tenant):
    tenant = make_tenant()
    response = client.post(
        "/api/payments",
        json={"tenantId": tenant.id, "rentAmount": 0, "depositAmount": 0},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "No payment amount provided"
    assert db.query(Payment).count() == 0


def test_legacy_status_spelling_is_accepted(client, auth_headers, make_tenant):
    tenant = make_tenant()
    response = client.post(
        "/api/payments",
        json={"tenantId": tenant.id, "rentAmount": 15000, "status": "Completed"},
        headers=auth_headers,
    )
    assert response.status_code == 201
    assert response.json()["status"] == "paid"


def test_lipa_na_mpesa_defaults_to_pending(client, auth_headers, make_tenant):
    tenant = make_tenant()
    response = client.post(
        "/api/payments",
        json={"tenantId": tenant.id, "rentAmount": 15000, "method": "lipa_na_mpesa"},
        headers=auth_headers,
    )
    assert response.json()["status"] == "pending"


def test_payment_for_unknown_tenant(client, auth_headers):
    response = client.post("/api/payments", json={"tenantId": 999, "rentAmount": 100}, headers=auth_headers)
    assert response.status_code == 404


def test_list_payments_newest_first(client, auth_headers, make_tenant, make_payment):
    tenant = make_tenant()
    older = make_payment(tenant, date=datetime(2026, 9, 1, 10, 0))
    newer = make_payment(tenant, date=datetime(2026, 10, 1, 10, 0))

    response = client.get("/api/payments", headers=auth_headers)
    assert response.status_code == 200
    assert [p["id"] for p in response.json()] == [newer.id, older.id]
    assert response.json()[0]["tenantName"] == tenant.name


def test_receipt_pdf(client, auth_headers, make_unit, make_tenant, make_payment):
    payment = make_payment(make_tenant(unit=make_unit()))
    response = client.get(f"/api/payments/{payment.id}/pdf", headers=auth_headers)
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")
    assert f"Receipt-{payment.id:08d}.pdf" in response.headers["content-disposition"]


def test_resend_receipt(client, auth_headers, make_tenant, make_payment):
    payment = make_payment(make_tenant())
    response = client.post(f"/api/payments/{payment.id}/email", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"message": "Receipt email sent successfully"}


def test_resend_receipt_failure_is_500(client, auth_headers, make_tenant, make_payment, monkeypatch):
    class FailingNotifier:
        def __init__(self, settings):
            pass

        def send_email(self, *args, **kwargs):
            raise NotificationError("All methods failed. Errors: ['smtp: refused']")

    monkeypatch.setattr("services.receipt_service.Notifier", FailingNotifier)
    payment = make_payment(make_tenant())
    response = client.post(f"/api/payments/{payment.id}/email", headers=auth_headers)
    assert response.status_code == 500
    assert "All methods failed" in response.json()["detail"]


def test_resend_receipt_without_tenant_email(client, auth_headers, make_tenant, make_payment):
    payment = make_payment(make_tenant(email=""))
    response = client.post(f"/api/payments/{payment.id}/email", headers=auth_headers)
    assert response.status_code == 400


def test_collected_statuses_only_count_paid_and_partial(db, make_tenant, make_payment):
    tenant = make_tenant()
    make_payment(tenant, status=PaymentStatus.PENDING, date=datetime(2026, 10, 3))
    make_payment(tenant, status=PaymentStatus.FAILED, date=datetime(2026, 10, 4))
    assert has_paid_since(db, tenant.id, datetime(2026, 10, 1)) is False

    make_payment(tenant, status=PaymentStatus.PARTIAL, date=datetime(2026, 10, 5))
    assert has_paid_since(db, tenant.id, datetime(2026, 10, 1)) is True


def test_missing_tenant_id_is_400(client, db, auth_headers):
    response = client.post("/api/payments", json={"rentAmount": 100}, headers=auth_headers)
    assert response.status_code == 400
    assert "tenantId" in response.json()["message"]
    assert db.query(Payment).count() == 0


def test_non_numeric_rent_amount_is_400(client, db, auth_headers, make_tenant):
    tenant = make_tenant()
    response = client.post("/api/payments", json={"tenantId": tenant.id, "rentAmount": "abc"}, headers=auth_headers)
    assert response.status_code == 400
    assert "rentAmount" in response.json()["message"]
    assert db.query(Payment).count() == 0


def test_error_body_carries_message(client, auth_headers, make_tenant):
    tenant = make_tenant()
    response = client.post(
        "/api/payments",
        json={"tenantId": tenant.id, "rentAmount": 0, "depositAmount": 0},
        headers=auth_headers,
    )
    assert response.json()["message"] == "No payment amount provided"
