from datetime import datetime
from decimal import Decimal
from unittest.mock import Mock

import requests

import config
from models import ActivityLog, PaymentStatus
from services.report_service import dashboard_stats, kra_tax_report, shift_month


def test_shift_month_crosses_years():
    assert shift_month(2026, 1, -1) == (2025, 12)
    assert shift_month(2026, 12, 1) == (2027, 1)
    assert shift_month(2026, 10, -5) == (2026, 5)


def test_dashboard_stats(db, make_property, make_unit, make_tenant, make_payment):
    prop = make_property()
    occupied = make_unit("A1", rent_amount="15000", prop=prop)
    make_unit("A2", rent_amount="12000", prop=prop)
    tenant = make_tenant(unit=occupied)
    make_payment(tenant, rent_amount="10000", date=datetime(2026, 10, 3))
    make_payment(tenant, rent_amount="9000", status=PaymentStatus.PENDING, date=datetime(2026, 10, 4))
    make_payment(tenant, rent_amount="15000", date=datetime(2026, 9, 3))

    stats = dashboard_stats(db, now=datetime(2026, 10, 19))

    assert stats["total_properties"] == 1
    assert stats["total_units"] == 2
    assert stats["occupied_units"] == 1
    assert stats["vacant_units"] == 1
    assert stats["occupancy_rate"] == 50
    assert stats["collected_this_month"] == Decimal("10000")
    assert stats["expected_monthly_rent"] == Decimal("15000")
    assert stats["outstanding_amount"] == Decimal("5000")


def test_dashboard_endpoint_with_no_data(client, auth_headers):
    response = client.get("/api/dashboard/stats", headers=auth_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["totalUnits"] == 0
    assert body["occupancyRate"] == 0


def test_kra_tax_is_seven_and_a_half_percent(db, admin, make_tenant, make_payment):
    tenant = make_tenant()
    make_payment(tenant, rent_amount="20000", date=datetime(2026, 10, 5), user=admin)
    make_payment(tenant, rent_amount="5000", status=PaymentStatus.PENDING, date=datetime(2026, 10, 6), user=admin)
    make_payment(tenant, rent_amount="7000", date=datetime(2026, 11, 1), user=admin)

    report = kra_tax_report(db, admin.id, "2026-10")

    assert report["month"] == "October 2026"
    assert report["gross_rent"] == Decimal("20000")
    assert report["tax_payable"] == Decimal("1500.00")
    assert report["currency"] == "KES"


def test_kra_tax_report_endpoint(client, auth_headers, admin, make_tenant, make_payment):
    make_payment(make_tenant(), rent_amount="10000", date=datetime(2026, 10, 5), user=admin)

    response = client.get("/api/reports/kra-tax-report", params={"month": "2026-10"}, headers=auth_headers)
    assert response.status_code == 200
    body = response.json()
    assert Decimal(str(body["grossRent"])) == Decimal("10000")
    assert Decimal(str(body["taxPayable"])) == Decimal("750.00")
    assert body["note"] == "Based on 7.5% MRI Rate"


def test_kra_tax_report_rejects_bad_month(client, auth_headers):
    response = client.get("/api/reports/kra-tax-report", params={"month": "October"}, headers=auth_headers)
    assert response.status_code == 400


def test_kra_filing_is_simulated_without_credentials(client, db, auth_headers):
    response = client.post(
        "/api/reports/kra-file-return",
        json={"grossRent": 20000, "tax": 1500, "period": "2026-10"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["simulated"] is True
    assert db.query(ActivityLog).filter(ActivityLog.action == "KRA Return Filed").count() == 1


def test_kra_filing_failure_is_500(client, auth_headers, monkeypatch):
    monkeypatch.setattr(config, "KRA_CLIENT_ID", "client")
    monkeypatch.setattr(config, "KRA_CLIENT_SECRET", "secret")
    token_response = Mock(json=Mock(return_value={"access_token": "kra-token"}))
    filing_error = requests.ConnectionError("KRA unreachable")
    monkeypatch.setattr(requests, "post", Mock(side_effect=[token_response, filing_error]))

    response = client.post(
        "/api/reports/kra-file-return",
        json={"grossRent": 20000, "tax": 1500, "period": "2026-10"},
        headers=auth_headers,
    )
    assert response.status_code == 500
    assert response.json()["success"] is False


def test_reports_page_data(client, auth_headers, admin, make_property, make_unit, make_tenant):
    prop = make_property()
    make_tenant(unit=make_unit("A1", prop=prop, user=admin))
    make_unit("A2", prop=prop, user=admin)

    response = client.get("/api/reports", headers=auth_headers)
    assert response.status_code == 200
    body = response.json()
    assert len(body["revenueData"]) == 6
    assert len(body["expenseData"]) == 6
    slices = {s["name"]: s["value"] for s in body["tenantData"]}
    assert slices == {"Occupied": 1, "Vacant": 1}


def test_reports_without_units_show_placeholder(client, auth_headers):
    body = client.get("/api/reports", headers=auth_headers).json()
    assert body["tenantData"] == [{"name": "No Data", "value": 1, "fill": "#eee"}]


def test_expenses_feed_the_expense_series(client, auth_headers):
    response = client.post(
        "/api/expenses",
        json={"title": "Plumbing", "amount": 4500, "category": "maintenance"},
        headers=auth_headers,
    )
    assert response.status_code == 201
    expense_id = response.json()["id"]

    body = client.get("/api/reports", headers=auth_headers).json()
    assert Decimal(str(body["expenseData"][-1]["amount"])) == Decimal("4500")

    assert client.delete(f"/api/expenses/{expense_id}", headers=auth_headers).json() == {"message": "Expense deleted"}
    assert client.get("/api/expenses", headers=auth_headers).json() == []
