from models import Tenant, TenantStatus, Unit, UnitStatus
from services.auth_service import create_access_token


def _tenant_body(**overrides):
    body = {
        "name": "Jane Wanjiru",
        "email": "jane@tenant.test",
        "phone": "0712345678",
        "nationalId": "12345678",
    }
    body.update(overrides)
    return body


def test_create_unit_starts_vacant(client, auth_headers, make_property):
    prop = make_property()
    response = client.post(
        "/api/units",
        json={"propertyId": prop.id, "unitNumber": "A1", "rentAmount": 15000},
        headers=auth_headers,
    )
    assert response.status_code == 201
    assert response.json()["status"] == "vacant"

    response = client.get("/api/units", params={"propertyId": prop.id}, headers=auth_headers)
    assert [u["unitNumber"] for u in response.json()] == ["A1"]


def test_unit_cannot_be_created_as_occupied(client, auth_headers, make_property):
    prop = make_property()
    response = client.post(
        "/api/units",
        json={"propertyId": prop.id, "unitNumber": "A1", "rentAmount": 15000, "status": "occupied"},
        headers=auth_headers,
    )
    assert response.status_code == 201
    assert response.json()["status"] == "vacant"


def test_creating_tenant_occupies_unit_and_snapshots_rent(client, db, auth_headers, make_unit):
    unit = make_unit(rent_amount="18000")
    response = client.post("/api/tenants", json=_tenant_body(unitId=unit.id), headers=auth_headers)
    assert response.status_code == 201
    body = response.json()
    assert body["unitId"] == unit.id
    assert body["unitNumber"] == "A1"
    assert float(body["rentAmount"]) == 18000

    db.refresh(unit)
    assert unit.status == UnitStatus.OCCUPIED


def test_empty_unit_id_means_no_unit(client, auth_headers):
    response = client.post("/api/tenants", json=_tenant_body(unitId=""), headers=auth_headers)
    assert response.status_code == 201
    assert response.json()["unitId"] is None


def test_occupied_unit_rejects_second_active_tenant(client, auth_headers, make_unit, make_tenant):
    unit = make_unit()
    make_tenant(unit=unit)
    response = client.post(
        "/api/tenants",
        json=_tenant_body(name="Peter Otieno", email="peter@tenant.test", unitId=unit.id),
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert "already occupied" in response.json()["detail"]


def test_moving_tenant_vacates_previous_unit(client, db, auth_headers, make_property, make_unit, make_tenant):
    prop = make_property()
    first = make_unit("A1", prop=prop)
    second = make_unit("A2", prop=prop)
    tenant = make_tenant(unit=first)

    response = client.put(f"/api/tenants/{tenant.id}", json={"unitId": second.id}, headers=auth_headers)
    assert response.status_code == 200

    db.refresh(first)
    db.refresh(second)
    assert first.status == UnitStatus.VACANT
    assert second.status == UnitStatus.OCCUPIED


def test_update_without_unit_id_keeps_unit(client, db, auth_headers, make_unit, make_tenant):
    unit = make_unit()
    tenant = make_tenant(unit=unit)

    response = client.put(f"/api/tenants/{tenant.id}", json={"phone": "0799000111"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["unitId"] == unit.id
    db.refresh(unit)
    assert unit.status == UnitStatus.OCCUPIED


def test_marking_tenant_past_vacates_unit(client, db, auth_headers, make_unit, make_tenant):
    unit = make_unit()
    tenant = make_tenant(unit=unit)

    response = client.put(f"/api/tenants/{tenant.id}", json={"status": "past"}, headers=auth_headers)
    assert response.status_code == 200
    db.refresh(unit)
    assert unit.status == UnitStatus.VACANT


def test_deleting_active_tenant_vacates_unit(client, db, auth_headers, make_unit, make_tenant):
    unit = make_unit()
    tenant = make_tenant(unit=unit)

    response = client.delete(f"/api/tenants/{tenant.id}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"message": "Tenant removed"}

    db.refresh(unit)
    assert unit.status == UnitStatus.VACANT
    assert db.get(Tenant, tenant.id) is None


def test_deleting_past_tenant_leaves_units_alone(client, db, auth_headers, make_unit, make_tenant):
    unit = make_unit()
    past = make_tenant(name="Old Tenant", unit=unit, status=TenantStatus.PAST)
    make_tenant(name="Current Tenant", unit=unit)
    db.refresh(unit)
    assert unit.status == UnitStatus.OCCUPIED

    response = client.delete(f"/api/tenants/{past.id}", headers=auth_headers)
    assert response.status_code == 200

    db.refresh(unit)
    assert unit.status == UnitStatus.OCCUPIED


def test_maintenance_survives_while_vacant(client, db, auth_headers, make_unit):
    unit = make_unit()
    response = client.put(f"/api/units/{unit.id}", json={"status": "maintenance"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "maintenance"

    response = client.put(f"/api/units/{unit.id}", json={"rentAmount": 16000}, headers=auth_headers)
    assert response.json()["status"] == "maintenance"


def test_occupied_unit_cannot_enter_maintenance(client, auth_headers, make_unit, make_tenant):
    unit = make_unit()
    make_tenant(unit=unit)
    response = client.put(f"/api/units/{unit.id}", json={"status": "maintenance"}, headers=auth_headers)
    assert response.status_code == 400


def test_deleting_unit_detaches_tenants(client, db, auth_headers, make_unit, make_tenant):
    unit = make_unit()
    tenant = make_tenant(unit=unit)

    response = client.delete(f"/api/units/{unit.id}", headers=auth_headers)
    assert response.status_code == 200
    db.refresh(tenant)
    assert tenant.unit_id is None
    assert db.get(Unit, unit.id) is None


def test_tenant_list_carries_payment_status(client, auth_headers, make_property, make_unit, make_tenant, make_payment):
    prop = make_property()
    paid = make_tenant(name="Paid Tenant", unit=make_unit("A1", prop=prop))
    partial = make_tenant(name="Partial Tenant", unit=make_unit("A2", prop=prop))
    make_tenant(name="Unpaid Tenant", unit=make_unit("A3", prop=prop))
    make_payment(paid, rent_amount="15000")
    make_payment(partial, rent_amount="5000")

    response = client.get("/api/tenants", headers=auth_headers)
    assert response.status_code == 200
    statuses = {t["name"]: t["paymentStatus"] for t in response.json()}
    assert statuses == {"Paid Tenant": "paid", "Partial Tenant": "partial", "Unpaid Tenant": "unpaid"}


def test_unit_writes_are_admin_only(client, caretaker, make_property):
    prop = make_property()
    headers = {"Authorization": f"Bearer {create_access_token(caretaker.id)}"}
    response = client.post(
        "/api/units",
        json={"propertyId": prop.id, "unitNumber": "A1", "rentAmount": 15000},
        headers=headers,
    )
    assert response.status_code == 403
