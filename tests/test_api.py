"""
Router tests through the FastAPI TestClient.
"""

from datetime import datetime


def _setup_lease(client, rent=5000, billing_day=5):
    room = client.post("/api/rooms", json={
        "name": "Room 201", "default_rent": rent, "default_deposit": 10000,
    }).json()
    tenant = client.post("/api/tenants", json={
        "full_name": "Asha Verma", "phone": "9000000001", "email": "asha@rentdesk.io",
    }).json()
    lease = client.post("/api/leases", json={
        "tenant_id": tenant["id"], "room_id": room["id"], "start_date": "2024-01-01",
        "rent_per_month": rent, "deposit_agreed": 10000, "billing_day": billing_day,
    })
    assert lease.status_code == 201
    return room, tenant, lease.json()


def test_health(client):
    assert client.get("/").json()["status"] == "running"


def test_room_crud(client):
    created = client.post("/api/rooms", json={"name": "Room 101", "default_rent": 4500, "default_deposit": 9000})
    assert created.status_code == 201
    room = created.json()
    assert room["status"] == "vacant"
    assert room["default_rent"] == 4500.0

    updated = client.put(f"/api/rooms/{room['id']}", json={"floor": "1st"})
    assert updated.json()["floor"] == "1st"
    assert client.get("/api/rooms").json()["total"] == 1


def test_duplicate_room_name_conflict(client):
    client.post("/api/rooms", json={"name": "Room 101", "default_rent": 4500, "default_deposit": 9000})
    response = client.post("/api/rooms", json={"name": "Room 101", "default_rent": 4500, "default_deposit": 9000})

    assert response.status_code == 409
    assert response.json() == {
        "success": False, "code": "CONFLICT", "message": "Room with this name already exists",
    }


def test_not_found_is_404(client):
    response = client.get("/api/rooms/999")
    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_lease_occupies_room_and_end_frees_it(client):
    room, _, lease = _setup_lease(client)
    assert client.get(f"/api/rooms/{room['id']}").json()["status"] == "occupied"

    ended = client.post(f"/api/leases/{lease['id']}/end", json={})
    assert ended.json()["status"] == "ended"
    assert ended.json()["end_date"] == "2024-03-01"
    assert client.get(f"/api/rooms/{room['id']}").json()["status"] == "vacant"


def test_generate_pay_and_list_invoices(client):
    _setup_lease(client, rent=1000)

    generated = client.post("/api/invoices/generate-monthly", json={"month": 3, "year": 2024}).json()
    assert generated["created"] == 1
    invoice = generated["data"][0]
    assert invoice["due_date"] == "2024-03-05"

    again = client.post("/api/invoices/generate-monthly", json={"month": 3, "year": 2024}).json()
    assert again["created"] == 0 and again["skipped"] == 1

    paid = client.post(f"/api/invoices/{invoice['id']}/pay", json={"amount": 400})
    assert paid.status_code == 200
    assert paid.json()["invoice"]["status"] == "partially_paid"
    assert paid.json()["payment"]["amount"] == 400.0

    over = client.post(f"/api/invoices/{invoice['id']}/pay", json={"amount": 700})
    assert over.status_code == 409
    assert "600.00" in over.json()["message"]

    bad = client.post(f"/api/invoices/{invoice['id']}/pay", json={"amount": 0})
    assert bad.status_code == 400
    assert bad.json()["code"] == "INVALID_AMOUNT"

    listing = client.get("/api/invoices", params={"month": 3, "year": 2024}).json()
    assert listing["summary"] == {"total_expected": 1000.0, "total_collected": 400.0, "total_pending": 600.0}


def test_recalculate_late_fees_endpoint(client, clock):
    _setup_lease(client)
    client.post("/api/invoices/generate-monthly", json={"month": 3, "year": 2024})

    missing = client.post("/api/invoices/recalculate-late-fees")
    assert missing.status_code == 412

    client.get("/api/settings")
    clock.set_time(datetime(2024, 3, 15, 9, 0))
    result = client.post("/api/invoices/recalculate-late-fees").json()
    assert result["updated"] == 1

    invoice = client.get("/api/invoices").json()["data"][0]
    assert invoice["late_fee"] == 35.0
    assert invoice["total_amount"] == 5035.0
    assert invoice["status"] == "overdue"


def test_light_bill_flow(client):
    room, tenant, _ = _setup_lease(client)
    client.post("/api/invoices/generate-monthly", json={"month": 3, "year": 2024})

    created = client.post("/api/light-bills", json={
        "room_id": room["id"], "units_consumed": 100, "rate_per_unit": 8,
        "fixed_charge": 50, "tax": 20,
    })
    assert created.status_code == 201
    bill = created.json()
    assert bill["total_amount"] == 1070.0
    assert bill["tenant_id"] == tenant["id"]

    duplicate = client.post("/api/light-bills", json={
        "room_id": room["id"], "units_consumed": 10, "rate_per_unit": 8,
    })
    assert duplicate.status_code == 409

    updated = client.put(f"/api/light-bills/{bill['id']}", json={"units_consumed": 50, "notes": None})
    assert updated.json()["total_amount"] == 470.0

    paid = client.post(f"/api/light-bills/{bill['id']}/pay", json={"amount": 470, "mode": "upi"})
    assert paid.json()["status"] == "paid"

    history = client.get(f"/api/payments/tenant/{tenant['id']}").json()
    assert history["total_light_paid"] == 470.0

    assert client.delete(f"/api/light-bills/{bill['id']}").json()["success"] is True
    assert client.get(f"/api/light-bills/{bill['id']}").status_code == 404


def test_settings_update(client):
    assert client.get("/api/settings").json()["grace_days"] == 3

    updated = client.put("/api/settings", json={"late_fee_type": "percentage", "percentage": 2})
    assert updated.json()["late_fee_type"] == "percentage"
    assert updated.json()["percentage"] == 2.0

    bad = client.put("/api/settings", json={"late_fee_type": "weekly"})
    assert bad.status_code == 400


def test_notifications_listing(client):
    _setup_lease(client)
    client.post("/api/invoices/generate-monthly", json={"month": 3, "year": 2024})

    listing = client.get("/api/notifications").json()
    assert listing["unread"] == 1
    assert listing["data"][0]["kind"] == "invoice_generated"

    client.put("/api/notifications/read-all")
    assert client.get("/api/notifications").json()["unread"] == 0


def test_dashboard(client):
    _setup_lease(client)
    client.post("/api/invoices/generate-monthly", json={"month": 3, "year": 2024})

    data = client.get("/api/dashboard").json()["data"]
    assert data["overview"]["total_rooms"] == 1
    assert data["overview"]["active_leases"] == 1
    assert data["invoice_summary"]["total_expected"] == 5000.0
    assert len(data["monthly_collections"]) == 6
    assert data["recent_invoices"][0]["total_amount"] == 5000.0


def test_register_login_and_me(session):
    from fastapi.testclient import TestClient

    from rentdesk.app import app
    from rentdesk.database import get_db

    def _get_db():
        yield session

    app.dependency_overrides[get_db] = _get_db
    try:
        client = TestClient(app)
        registered = client.post("/api/auth/register", json={
            "name": "Owner", "email": "owner@rentdesk.io", "password": "s3cret-pass",
        })
        assert registered.status_code == 201

        duplicate = client.post("/api/auth/register", json={
            "name": "Owner", "email": "owner@rentdesk.io", "password": "s3cret-pass",
        })
        assert duplicate.status_code == 409

        wrong = client.post("/api/auth/login", json={"email": "owner@rentdesk.io", "password": "nope"})
        assert wrong.status_code == 401

        token = client.post("/api/auth/login", json={
            "email": "owner@rentdesk.io", "password": "s3cret-pass",
        }).json()["access_token"]

        me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["email"] == "owner@rentdesk.io"

        assert client.get("/api/rooms").status_code in (401, 403)
        bad_token = client.get("/api/rooms", headers={"Authorization": "Bearer not-a-token"})
        assert bad_token.status_code == 401
    finally:
        app.dependency_overrides.clear()


def test_payments_listing_and_detail(client):
    room, tenant, _ = _setup_lease(client)
    client.post("/api/invoices/generate-monthly", json={"month": 3, "year": 2024})
    invoice = client.get("/api/invoices").json()["data"][0]

    rejected = client.post(f"/api/invoices/{invoice['id']}/pay", json={"amount": "0.005"})
    assert rejected.status_code == 400
    assert rejected.json()["code"] == "INVALID_AMOUNT"

    paid = client.post(f"/api/invoices/{invoice['id']}/pay", json={"amount": 400}).json()
    bill = client.post("/api/light-bills", json={
        "room_id": room["id"], "units_consumed": 100, "rate_per_unit": 8,
        "fixed_charge": 50, "tax": 20,
    }).json()
    client.post(f"/api/light-bills/{bill['id']}/pay", json={"amount": 70})

    listing = client.get("/api/payments").json()
    assert listing["count"] == 2
    assert listing["total_amount"] == 470.0
    group = listing["data"][0]
    assert group["tenant_name"] == "Asha Verma"
    assert sorted(p["type"] for p in group["payments"]) == ["invoice", "light_bill"]

    only_upi = client.get("/api/payments", params={"mode": "upi"}).json()
    assert only_upi["count"] == 0

    detail = client.get(f"/api/payments/{paid['payment']['id']}").json()
    assert detail["type"] == "invoice"
    assert detail["amount"] == 400.0
    assert detail["invoice"]["id"] == invoice["id"]

    light = client.get(f"/api/payments/{bill['id']}", params={"type": "light_bill"}).json()
    assert light["type"] == "light_bill"
    assert light["light_bill"]["total_amount"] == 1070.0

    assert client.get("/api/payments/999").status_code == 404


def test_notification_lookup_and_deletion(client):
    _setup_lease(client)
    client.post("/api/invoices/generate-monthly", json={"month": 3, "year": 2024})
    generated = client.get("/api/notifications").json()["data"][0]

    one = client.get(f"/api/notifications/{generated['id']}").json()
    assert one["kind"] == "invoice_generated"

    assert client.delete("/api/notifications").json()["message"] == "Deleted 0 read notifications"

    client.put("/api/notifications/read-all")
    invoice = client.get("/api/invoices").json()["data"][0]
    client.post(f"/api/invoices/{invoice['id']}/pay", json={"amount": 100})

    assert client.delete("/api/notifications").json()["message"] == "Deleted 1 read notifications"
    remaining = client.get("/api/notifications").json()
    assert remaining["total"] == 1
    received = remaining["data"][0]
    assert received["kind"] == "payment_received"

    deleted = client.delete(f"/api/notifications/{received['id']}")
    assert deleted.json()["success"] is True
    assert client.get(f"/api/notifications/{received['id']}").status_code == 404
    assert client.delete(f"/api/notifications/{received['id']}").status_code == 404
