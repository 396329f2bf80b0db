import base64
from datetime import datetime
from decimal import Decimal
from unittest.mock import Mock

import pytest
import requests

from main import app
from models import Payment, PaymentMethod, PaymentStatus
from routers.mpesa import get_daraja_client
from schemas.settings import Integrations, MpesaIntegration, SettingsSnapshot
from services.mpesa_service import (
    PRODUCTION_URL,
    SANDBOX_URL,
    DarajaClient,
    MpesaConfig,
    MpesaError,
    StkPushResult,
    make_password,
    make_timestamp,
    normalize_phone,
)


def _snapshot(**mpesa):
    return SettingsSnapshot(integrations=Integrations(mpesa=MpesaIntegration(**mpesa)))


def _mpesa_config(environment="sandbox"):
    return MpesaConfig(
        consumer_key="key",
        consumer_secret="secret",
        passkey="passkey",
        shortcode="174379",
        environment=environment,
    )


def _callback(checkout_id, result_code=0, receipt="QJK3ABCD12", amount=1500):
    callback = {
        "MerchantRequestID": "29115-34620561-1",
        "CheckoutRequestID": checkout_id,
        "ResultCode": result_code,
        "ResultDesc": "The service request is processed successfully." if result_code == 0 else "Request cancelled by user",
    }
    if result_code == 0:
        callback["CallbackMetadata"] = {
            "Item": [
                {"Name": "Amount", "Value": amount},
                {"Name": "MpesaReceiptNumber", "Value": receipt},
                {"Name": "TransactionDate", "Value": 20261019102115},
                {"Name": "PhoneNumber", "Value": 254712345678},
            ]
        }
    return {"Body": {"stkCallback": callback}}


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("0712345678", "254712345678"),
        ("0712 345 678", "254712345678"),
        ("+254712345678", "254712345678"),
        ("712345678", "254712345678"),
        ("110123456", "254110123456"),
        ("254712345678", "254712345678"),
    ],
)
def test_normalize_phone(raw, expected):
    assert normalize_phone(raw) == expected


def test_timestamp_and_password():
    timestamp = make_timestamp(datetime(2026, 10, 19, 8, 5, 3))
    assert timestamp == "20261019080503"
    password = make_password("174379", "passkey", timestamp)
    assert base64.b64decode(password).decode() == "174379passkey20261019080503"


def test_config_requires_enabled_integration():
    with pytest.raises(MpesaError, match="not enabled"):
        MpesaConfig.from_settings(_snapshot(enabled=False))


def test_config_requires_all_keys():
    with pytest.raises(MpesaError, match="Missing M-Pesa configuration keys."):
        MpesaConfig.from_settings(_snapshot(enabled=True, consumer_key="key", paybill="174379"))


def test_config_base_url_follows_environment():
    snapshot = _snapshot(
        enabled=True, consumer_key="key", consumer_secret="secret", passkey="pk", paybill="174379",
    )
    assert MpesaConfig.from_settings(snapshot).base_url == SANDBOX_URL
    assert _mpesa_config("production").base_url == PRODUCTION_URL


def test_token_failure_raises_mpesa_error():
    session = Mock()
    session.get.return_value.raise_for_status.side_effect = requests.HTTPError("400 Bad Request")
    client = DarajaClient(_mpesa_config(), session=session)
    with pytest.raises(MpesaError, match="Failed to generate M-Pesa token."):
        client.get_access_token()


def test_stk_push_builds_daraja_payload():
    session = Mock()
    session.get.return_value.json.return_value = {"access_token": "tok", "expires_in": "3599"}
    session.post.return_value.status_code = 200
    session.post.return_value.json.return_value = {
        "MerchantRequestID": "29115-34620561-1",
        "CheckoutRequestID": "ws_CO_191020261021",
        "ResponseCode": "0",
        "CustomerMessage": "Success. Request accepted for processing",
    }
    client = DarajaClient(_mpesa_config(), session=session)

    result = client.stk_push(
        "0712345678", Decimal("1500.40"), "A1",
        callback_url="https://dwello.test/api/mpesa/callback", now=datetime(2026, 10, 19, 10, 21, 0),
    )

    assert result.checkout_request_id == "ws_CO_191020261021"
    assert result.merchant_request_id == "29115-34620561-1"
    url = session.post.call_args.args[0]
    payload = session.post.call_args.kwargs["json"]
    assert url == f"{SANDBOX_URL}/mpesa/stkpush/v1/processrequest"
    assert session.post.call_args.kwargs["headers"] == {"Authorization": "Bearer tok"}
    assert payload["Amount"] == 1501
    assert payload["PartyA"] == payload["PhoneNumber"] == "254712345678"
    assert payload["PartyB"] == payload["BusinessShortCode"] == "174379"
    assert payload["TransactionType"] == "CustomerPayBillOnline"
    assert payload["Timestamp"] == "20261019102100"
    assert payload["TransactionDesc"] == "Rent Payment"


def test_stk_push_surfaces_upstream_error_message():
    session = Mock()
    session.get.return_value.json.return_value = {"access_token": "tok"}
    session.post.return_value.status_code = 400
    session.post.return_value.json.return_value = {
        "requestId": "1234",
        "errorCode": "400.002.02",
        "errorMessage": "Bad Request - Invalid PhoneNumber",
    }
    client = DarajaClient(_mpesa_config(), session=session)
    with pytest.raises(MpesaError, match="Invalid PhoneNumber"):
        client.stk_push("0712345678", 100, "A1")


class FakeDarajaClient:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def stk_push(self, phone, amount, account_reference, callback_url=None, transaction_desc="Rent Payment"):
        self.calls.append((phone, amount, account_reference))
        if self.error:
            raise MpesaError(self.error)
        return StkPushResult(checkout_request_id="ws_CO_TEST_1", merchant_request_id="m-1")


@pytest.fixture
def fake_daraja():
    fake = FakeDarajaClient()
    app.dependency_overrides[get_daraja_client] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_daraja_client, None)


def test_stk_push_creates_pending_payment(client, db, auth_headers, fake_daraja, make_unit, make_tenant):
    tenant = make_tenant(unit=make_unit())
    response = client.post(
        "/api/mpesa/stk-push",
        json={"phoneNumber": "0712345678", "amount": 15000, "accountReference": "A1", "tenantId": tenant.id},
        headers=auth_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["checkoutRequestId"] == "ws_CO_TEST_1"

    payment = db.get(Payment, body["paymentId"])
    assert payment.status == PaymentStatus.PENDING
    assert payment.method == PaymentMethod.LIPA_NA_MPESA
    assert payment.checkout_request_id == "ws_CO_TEST_1"
    assert payment.unit_id == tenant.unit_id


def test_stk_push_reuses_existing_payment(client, db, auth_headers, fake_daraja, make_tenant, make_payment):
    payment = make_payment(make_tenant(), status=PaymentStatus.PENDING, method=PaymentMethod.LIPA_NA_MPESA)
    response = client.post(
        "/api/mpesa/stk-push",
        json={"phoneNumber": "0712345678", "amount": 15000, "accountReference": "A1", "paymentId": payment.id},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["paymentId"] == payment.id
    db.refresh(payment)
    assert payment.checkout_request_id == "ws_CO_TEST_1"
    assert db.query(Payment).count() == 1


def test_stk_push_needs_tenant_or_payment(client, auth_headers, fake_daraja):
    response = client.post(
        "/api/mpesa/stk-push",
        json={"phoneNumber": "0712345678", "amount": 100, "accountReference": "A1"},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert fake_daraja.calls == []


def test_stk_push_gateway_error_is_500(client, db, auth_headers, fake_daraja, make_tenant):
    fake_daraja.error = "Bad Request - Invalid PhoneNumber"
    tenant = make_tenant()
    response = client.post(
        "/api/mpesa/stk-push",
        json={"phoneNumber": "0700000000", "amount": 100, "accountReference": "A1", "tenantId": tenant.id},
        headers=auth_headers,
    )
    assert response.status_code == 500
    assert response.json()["detail"] == "Bad Request - Invalid PhoneNumber"
    assert db.query(Payment).count() == 0


def test_stk_push_with_mpesa_disabled(client, auth_headers, make_tenant):
    tenant = make_tenant()
    response = client.post(
        "/api/mpesa/stk-push",
        json={"phoneNumber": "0712345678", "amount": 100, "accountReference": "A1", "tenantId": tenant.id},
        headers=auth_headers,
    )
    assert response.status_code == 500
    assert response.json()["detail"] == "M-Pesa integration is not enabled in settings."


def test_successful_callback_marks_payment_paid(client, db, make_tenant, make_payment):
    payment = make_payment(make_tenant(), rent_amount="1000", status=PaymentStatus.PENDING, checkout_request_id="ws_CO_1")

    response = client.post("/api/mpesa/callback", json=_callback("ws_CO_1", amount=1500))
    assert response.status_code == 200
    assert response.json() == {"result": "success"}

    db.refresh(payment)
    assert payment.status == PaymentStatus.PAID
    assert payment.reference == "QJK3ABCD12"
    assert payment.amount == Decimal("1500")


def test_failed_callback_only_changes_status(client, db, make_tenant, make_payment):
    payment = make_payment(make_tenant(), rent_amount="1000", status=PaymentStatus.PENDING, checkout_request_id="ws_CO_2")

    response = client.post("/api/mpesa/callback", json=_callback("ws_CO_2", result_code=1032))
    assert response.status_code == 200

    db.refresh(payment)
    assert payment.status == PaymentStatus.FAILED
    assert payment.reference is None
    assert payment.amount == Decimal("1000")


def test_repeated_callback_is_ignored(client, db, make_tenant, make_payment):
    payment = make_payment(make_tenant(), rent_amount="1000", status=PaymentStatus.PENDING, checkout_request_id="ws_CO_3")

    client.post("/api/mpesa/callback", json=_callback("ws_CO_3", amount=1000))
    response = client.post("/api/mpesa/callback", json=_callback("ws_CO_3", result_code=1))
    assert response.json() == {"result": "success"}

    db.refresh(payment)
    assert payment.status == PaymentStatus.PAID
    assert payment.reference == "QJK3ABCD12"


def test_unknown_checkout_id_is_acknowledged(client, db):
    response = client.post("/api/mpesa/callback", json=_callback("ws_CO_UNKNOWN"))
    assert response.status_code == 200
    assert response.json() == {"result": "success"}


def test_malformed_callback_is_400(client, db):
    response = client.post("/api/mpesa/callback", json={"Body": {"unexpected": True}})
    assert response.status_code == 400


@pytest.mark.parametrize("status", [PaymentStatus.PAID, PaymentStatus.FAILED])
def test_stk_push_does_not_reopen_settled_payment(client, db, auth_headers, fake_daraja, make_tenant, make_payment, status):
    payment = make_payment(make_tenant(), status=status, checkout_request_id="ws_CO_OLD")
    response = client.post(
        "/api/mpesa/stk-push",
        json={"phoneNumber": "0712345678", "amount": 15000, "accountReference": "A1", "paymentId": payment.id},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert response.json()["message"] == f"Payment is already {status.value}"
    assert fake_daraja.calls == []

    db.refresh(payment)
    assert payment.status == status
    assert payment.checkout_request_id == "ws_CO_OLD"
