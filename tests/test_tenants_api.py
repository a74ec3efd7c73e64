import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from sab_api.models import Activity, Subscription, Tenant

from conftest import TEST_PASSWORD, activity_actions, row_count, seed_tenant, seed_user


def test_acme_cannot_be_deleted_while_bob_belongs_to_it(api_client, db_session, admin_headers):
    resp = api_client.post("/api/tenants", json={"name": "Acme", "domain": "acme.com"}, headers=admin_headers)
    assert resp.status_code == 201
    acme_id = resp.json()["id"]

    resp = api_client.post(
        "/api/users",
        json={"username": "bob", "email": "bob@acme.com", "password": TEST_PASSWORD, "tenantId": acme_id},
        headers=admin_headers,
    )
    assert resp.status_code == 201
    bob_id = resp.json()["id"]

    resp = api_client.delete(f"/api/tenants/{acme_id}", headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["code"] == "TENANT_HAS_USERS"
    assert resp.json()["details"]["userCount"] == 1

    assert api_client.delete(f"/api/users/{bob_id}", headers=admin_headers).status_code == 204
    assert api_client.delete(f"/api/tenants/{acme_id}", headers=admin_headers).status_code == 204

    assert row_count(db_session, Tenant) == 0
    assert activity_actions(db_session) == ["tenant.created", "user.created", "user.deleted", "tenant.deleted"]


def test_restrict_foreign_key_backs_up_tenant_delete(db_session):
    acme = seed_tenant(db_session, "Acme")
    seed_user(db_session, "bob", tenant_id=acme.id)

    db_session.delete(acme)
    with pytest.raises(IntegrityError):
        db_session.flush()
    db_session.rollback()


def test_duplicate_name_or_domain_conflicts(api_client, db_session, admin_headers):
    seed_tenant(db_session, "Acme", domain="acme.com")

    resp = api_client.post("/api/tenants", json={"name": "Acme"}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["code"] == "TENANT_EXISTS"

    resp = api_client.post("/api/tenants", json={"name": "Globex", "domain": "acme.com"}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["error"][0]["field"] == "domain"

    assert activity_actions(db_session) == []


def test_tenants_without_domain_do_not_conflict(api_client, admin_headers):
    assert api_client.post("/api/tenants", json={"name": "Acme"}, headers=admin_headers).status_code == 201
    assert api_client.post("/api/tenants", json={"name": "Globex"}, headers=admin_headers).status_code == 201


def test_tenant_status_must_be_known(api_client, admin_headers):
    resp = api_client.post("/api/tenants", json={"name": "Acme", "status": "deleted"}, headers=admin_headers)

    assert resp.status_code == 400
    assert resp.json()["error"][0]["field"] == "status"


def test_update_tenant_records_changed_fields(api_client, db_session, admin, admin_headers):
    acme = seed_tenant(db_session, "Acme")

    resp = api_client.patch(f"/api/tenants/{acme.id}", json={"status": "trial"}, headers=admin_headers)

    assert resp.status_code == 200
    assert resp.json()["status"] == "trial"
    assert resp.json()["name"] == "Acme"
    entry = db_session.execute(select(Activity)).scalar_one()
    assert entry.action == "tenant.updated"
    assert entry.tenant_id == acme.id
    assert entry.actor_user_id == admin.id
    assert entry.details == {"before": {"status": "active"}, "after": {"status": "trial"}}


def test_tenant_delete_ignores_subscriptions(api_client, db_session, admin_headers):
    acme = seed_tenant(db_session, "Acme")
    db_session.add(Subscription(tenant_id=acme.id, plan_id=1))
    db_session.commit()

    assert api_client.delete(f"/api/tenants/{acme.id}", headers=admin_headers).status_code == 204
    assert row_count(db_session, Subscription) == 1


def test_non_admin_can_read_but_not_write_tenants(api_client, db_session, member_headers):
    acme = seed_tenant(db_session, "Acme")

    assert api_client.get("/api/tenants", headers=member_headers).status_code == 200
    assert api_client.get(f"/api/tenants/{acme.id}", headers=member_headers).json()["name"] == "Acme"
    assert api_client.post("/api/tenants", json={"name": "Globex"}, headers=member_headers).status_code == 403
    assert api_client.patch(f"/api/tenants/{acme.id}", json={"name": "Xy"}, headers=member_headers).status_code == 403
    assert api_client.delete(f"/api/tenants/{acme.id}", headers=member_headers).status_code == 403


def test_missing_tenant_returns_404(api_client, admin_headers):
    assert api_client.get("/api/tenants/404", headers=admin_headers).status_code == 404
    assert api_client.patch("/api/tenants/404", json={"name": "Xy"}, headers=admin_headers).status_code == 404
    assert api_client.delete("/api/tenants/404", headers=admin_headers).status_code == 404
