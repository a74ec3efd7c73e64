from datetime import datetime, timedelta, timezone

from sab_api.core.config import get_settings
from sab_api.models import Activity

from conftest import TEST_PASSWORD, seed_tenant, seed_user


def test_activities_are_newest_first_with_id_tiebreak(api_client, db_session, member_headers):
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    db_session.add_all(
        [
            Activity(action="a.first", resource_type="x", description="1", created_at=base),
            Activity(action="a.tie_low", resource_type="x", description="2", created_at=base + timedelta(minutes=5)),
            Activity(action="a.tie_high", resource_type="x", description="3", created_at=base + timedelta(minutes=5)),
            Activity(action="a.oldest", resource_type="x", description="4", created_at=base - timedelta(days=1)),
        ]
    )
    db_session.commit()

    resp = api_client.get("/api/activities", headers=member_headers)

    assert resp.status_code == 200
    assert [item["action"] for item in resp.json()] == ["a.tie_high", "a.tie_low", "a.first", "a.oldest"]


def test_activity_limit_defaults_and_caps(api_client, db_session, member_headers, monkeypatch):
    db_session.add_all([Activity(action=f"a.{i}", resource_type="x", description=str(i)) for i in range(7)])
    db_session.commit()

    assert len(api_client.get("/api/activities", params={"limit": 3}, headers=member_headers).json()) == 3

    monkeypatch.setenv("SAB_ACTIVITY_DEFAULT_LIMIT", "5")
    monkeypatch.setenv("SAB_ACTIVITY_MAX_LIMIT", "6")
    get_settings.cache_clear()
    assert len(api_client.get("/api/activities", headers=member_headers).json()) == 5
    assert len(api_client.get("/api/activities", params={"limit": 100}, headers=member_headers).json()) == 6


def test_activity_limit_must_be_positive(api_client, member_headers):
    resp = api_client.get("/api/activities", params={"limit": 0}, headers=member_headers)

    assert resp.status_code == 400
    assert resp.json()["error"][0]["field"] == "limit"


def test_dashboard_counts_follow_every_mutation(api_client, db_session, admin, admin_headers):
    def stats():
        resp = api_client.get("/api/dashboard/stats", headers=admin_headers)
        assert resp.status_code == 200
        return resp.json()

    assert stats() == {"totalUsers": 1, "activeUsers": 1, "totalTenants": 0, "activeTenants": 0, "totalPlans": 0}

    seed_tenant(db_session, "Acme")
    seed_tenant(db_session, "Globex", status="trial")
    seed_user(db_session, "pending-pete", status="pending")
    assert stats() == {"totalUsers": 2, "activeUsers": 1, "totalTenants": 2, "activeTenants": 1, "totalPlans": 0}

    resp = api_client.post(
        "/api/users",
        json={"username": "bob", "email": "bob@acme.com", "password": TEST_PASSWORD},
        headers=admin_headers,
    )
    bob_id = resp.json()["id"]
    assert stats()["activeUsers"] == 2

    api_client.patch(f"/api/users/{bob_id}", json={"status": "inactive"}, headers=admin_headers)
    assert stats()["activeUsers"] == 1
    assert stats()["totalUsers"] == 3

    api_client.post("/api/plans", json={"name": "Pro", "price": 100}, headers=admin_headers)
    assert stats()["totalPlans"] == 1


def test_dashboard_requires_session(api_client):
    assert api_client.get("/api/dashboard/stats").status_code == 401
