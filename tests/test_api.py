from datetime import date

from estate_service.app.models.leasing_tenants.leases import Lease


def create_lease(client, db, owner, tenant, start="2024-01-01", rent="10000", deposit="0"):
    shop = client.post("/api/shops", json={
        "shop_number": "F-12", "floor": "first", "ownership_type": "sole", "owner_id": owner.id,
    })
    assert shop.status_code == 201
    resp = client.post("/api/leases", json={
        "tenant_id": tenant.id,
        "shop_id": shop.json()["data"]["id"],
        "start_date": start,
        "end_date": "2099-12-31",
        "monthly_rent": rent,
        "security_deposit": deposit,
    })
    assert resp.status_code == 201
    return resp.json()["data"]


class TestEnvelope:
    def test_success_is_wrapped(self, client):
        body = client.get("/api/owners").json()
        assert body["status"] == "Success"
        assert body["data"] == []

    def test_not_found_is_wrapped(self, client):
        resp = client.get("/api/leases/999")
        assert resp.status_code == 404
        assert resp.json()["status_code"] == "404"


def test_common_share(client):
    body = client.get("/api/common-share", params={"amount": "8000", "owner_count": 4}).json()
    assert body["data"]["share"] == "2000.00"

    resp = client.get("/api/common-share", params={"amount": "8000", "owner_count": 0})
    assert resp.status_code == 400


def test_sole_shop_needs_owner(client):
    resp = client.post("/api/shops", json={
        "shop_number": "G-01", "floor": "ground", "ownership_type": "sole"})
    assert resp.status_code == 400


def test_payment_flow(client, db, owner, tenant):
    lease = create_lease(client, db, owner, tenant, start=date.today().replace(day=1).isoformat())
    assert lease["shop_number"] == "F-12"

    invoices = client.get(f"/api/leases/{lease['id']}/invoices").json()["data"]
    assert len(invoices) == 1

    payment = client.post("/api/payments", json={
        "tenant_id": tenant.id,
        "lease_id": lease["id"],
        "amount": "10000",
        "payment_date": date.today().isoformat(),
        "rent_months": [date.today().strftime("%Y-%m")],
    })
    assert payment.status_code == 201
    invoices = client.get(f"/api/leases/{lease['id']}/invoices").json()["data"]
    assert invoices[0]["is_paid"] is True

    form = client.get(f"/api/leases/{lease['id']}/payment-form-data").json()["data"]
    assert form["months"][0]["is_current"] is True
    assert form["months"][0]["payment_dates"] == [date.today().isoformat()]
    assert len(form["months"]) == 12

    payment_id = payment.json()["data"]["id"]
    assert client.request("DELETE", f"/api/payments/{payment_id}", json={}).status_code == 422
    deleted = client.request("DELETE", f"/api/payments/{payment_id}", json={"reason": "Duplicate entry"})
    assert deleted.json()["data"]["is_deleted"] is True

    ledger = client.get(f"/api/tenants/{tenant.id}/ledger").json()["data"]
    assert ledger["current_due"] == "10000.00"


def test_zero_payment_rejected(client, db, owner, tenant):
    lease = create_lease(client, db, owner, tenant)
    resp = client.post("/api/payments", json={
        "tenant_id": tenant.id, "lease_id": lease["id"],
        "amount": "0", "payment_date": date.today().isoformat(),
    })
    assert resp.status_code == 422


def test_terminate_then_reject_writes(client, db, owner, tenant):
    lease = create_lease(client, db, owner, tenant, start=date.today().replace(day=1).isoformat(),
                         rent="7500", deposit="10000")

    preview = client.get(f"/api/leases/{lease['id']}/settlement",
                         params={"use_security_deposit": True}).json()["data"]
    assert preview["security_deposit_used"] == "7500.00"
    assert preview["final_settled_amount"] == "0.00"

    resp = client.patch(f"/api/leases/{lease['id']}/terminate",
                        json={"use_security_deposit": True, "termination_notes": "Closed"})
    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "terminated"
    assert db.get(Lease, lease["id"]).status == "terminated"

    again = client.patch(f"/api/leases/{lease['id']}/terminate", json={})
    assert again.status_code == 409
    regen = client.post(f"/api/leases/{lease['id']}/regenerate-invoices")
    assert regen.status_code == 409


def test_recalculate_fifo(client, db, owner, tenant):
    create_lease(client, db, owner, tenant)
    body = client.post("/api/admin/recalculate-fifo").json()
    assert body["data"] == {"processed": 1, "skipped": 0}


def test_soft_delete_expense_and_bank_deposit(client, owner):
    expense = client.post("/api/expenses", json={
        "expense_type": "guard", "description": "Night guard", "amount": "1200",
        "expense_date": "2024-03-05", "allocation": "common",
    }).json()["data"]
    deposit = client.post("/api/bank-deposits", json={
        "owner_id": owner.id, "amount": "5000", "deposit_date": "2024-03-10",
        "bank_name": "Sonali Bank",
    }).json()["data"]

    assert client.request("DELETE", f"/api/expenses/{expense['id']}", json={}).status_code == 422
    gone = client.request("DELETE", f"/api/expenses/{expense['id']}", json={"reason": "Entered twice"})
    assert gone.json()["data"]["is_deleted"] is True
    assert client.get("/api/expenses").json()["data"] == []

    gone = client.request("DELETE", f"/api/bank-deposits/{deposit['id']}", json={"reason": "Bounced"})
    assert gone.json()["data"]["deletion_reason"] == "Bounced"
    listing = client.get("/api/bank-deposits").json()["data"]
    assert listing == {"deposits": [], "total": "0.00"}

    missing = client.request("DELETE", "/api/bank-deposits/999", json={"reason": "Bounced"})
    assert missing.status_code == 404


def test_owner_details(client, db, owner, tenant):
    create_lease(client, db, owner, tenant, rent="3000", deposit="6000")

    body = client.get(f"/api/owners/{owner.id}/details").json()["data"]

    assert body["summary"]["total_tenants"] == 1
    assert body["summary"]["total_security_deposit"] == "6000.00"
    assert len(body["monthly_reports"]) == 12
    assert client.get("/api/owners/999/details").status_code == 404
