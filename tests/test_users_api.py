from sab_api.models import Activity, User

from conftest import TEST_PASSWORD, activity_actions, auth_headers, row_count, seed_tenant, seed_user


def test_requests_without_token_are_rejected(api_client):
    resp = api_client.get("/api/users")

    assert resp.status_code == 401
    body = resp.json()
    assert body["code"] == "UNAUTHORIZED"
    assert body["requestId"] == resp.headers["X-Request-Id"]
    assert "X-Process-Time-Ms" in resp.headers


def test_inactive_user_token_is_rejected(api_client, db_session):
    ghost = seed_user(db_session, "ghost", status="inactive")

    resp = api_client.get("/api/users", headers=auth_headers(ghost))

    assert resp.status_code == 401


def test_list_users_never_exposes_password(api_client, admin_headers, member):
    resp = api_client.get("/api/users", headers=admin_headers)

    assert resp.status_code == 200
    usernames = [item["username"] for item in resp.json()]
    assert usernames == ["root", "alice"]
    for item in resp.json():
        assert "password" not in item
        assert "passwordHash" not in item
        assert "password_hash" not in item


def test_list_users_filters_by_tenant(api_client, db_session, admin_headers):
    acme = seed_tenant(db_session, "Acme")
    seed_user(db_session, "bob", tenant_id=acme.id)
    seed_user(db_session, "carol")

    resp = api_client.get("/api/users", params={"tenantId": acme.id}, headers=admin_headers)

    assert resp.status_code == 200
    assert [item["username"] for item in resp.json()] == ["bob"]


def test_get_missing_user_returns_404(api_client, admin_headers):
    resp = api_client.get("/api/users/999", headers=admin_headers)

    assert resp.status_code == 404
    assert resp.json()["code"] == "NOT_FOUND"


def test_admin_creates_user_and_records_activity(api_client, db_session, admin, admin_headers):
    acme = seed_tenant(db_session, "Acme", domain="acme.com")

    resp = api_client.post(
        "/api/users",
        json={
            "username": "bob",
            "email": "bob@acme.com",
            "password": TEST_PASSWORD,
            "fullName": "Bob",
            "tenantId": acme.id,
        },
        headers=admin_headers,
    )

    assert resp.status_code == 201
    body = resp.json()
    assert body["username"] == "bob"
    assert body["role"] == "user"
    assert body["status"] == "active"
    assert body["tenantId"] == acme.id
    assert "password" not in body

    entries = db_session.query(Activity).all()
    assert [entry.action for entry in entries] == ["user.created"]
    assert entries[0].actor_user_id == admin.id
    assert entries[0].tenant_id == acme.id
    assert entries[0].resource_id == body["id"]
    assert "root" in entries[0].description and "bob" in entries[0].description


def test_duplicate_username_or_email_conflicts_without_activity(api_client, db_session, admin_headers, member):
    resp = api_client.post(
        "/api/users",
        json={"username": "alice", "email": "other@example.com", "password": TEST_PASSWORD},
        headers=admin_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "USER_EXISTS"
    assert resp.json()["error"][0]["field"] == "username"

    resp = api_client.post(
        "/api/users",
        json={"username": "alice2", "email": "alice@example.com", "password": TEST_PASSWORD},
        headers=admin_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["error"][0]["field"] == "email"

    assert activity_actions(db_session) == []
    assert row_count(db_session, User) == 2


def test_create_user_with_unknown_tenant_is_reference_error(api_client, admin_headers):
    resp = api_client.post(
        "/api/users",
        json={"username": "bob", "email": "bob@acme.com", "password": TEST_PASSWORD, "tenantId": 42},
        headers=admin_headers,
    )

    assert resp.status_code == 400
    assert resp.json()["code"] == "REFERENCE_NOT_FOUND"
    assert resp.json()["error"][0]["field"] == "tenantId"


def test_create_user_rejects_unknown_fields_and_bad_enum(api_client, admin_headers):
    resp = api_client.post(
        "/api/users",
        json={"username": "bob", "email": "bob@acme.com", "password": TEST_PASSWORD, "isSuperuser": True},
        headers=admin_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "VALIDATION_ERROR"
    assert resp.json()["error"][0]["field"] == "isSuperuser"

    resp = api_client.post(
        "/api/users",
        json={"username": "bob", "email": "bob@acme.com", "password": TEST_PASSWORD, "role": "owner"},
        headers=admin_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["error"][0]["field"] == "role"


def test_non_admin_cannot_create_user(api_client, member_headers):
    resp = api_client.post(
        "/api/users",
        json={"username": "bob", "email": "bob@acme.com", "password": TEST_PASSWORD},
        headers=member_headers,
    )

    assert resp.status_code == 403
    assert resp.json()["code"] == "FORBIDDEN"


def test_non_admin_cannot_patch_other_user(api_client, db_session, member_headers):
    other = seed_user(db_session, "bob")

    resp = api_client.patch(f"/api/users/{other.id}", json={"fullName": "Hacked"}, headers=member_headers)

    assert resp.status_code == 403
    assert activity_actions(db_session) == []


def test_non_admin_self_patch_ignores_role(api_client, db_session, member, member_headers):
    resp = api_client.patch(
        f"/api/users/{member.id}",
        json={"email": "alice@new.example.com", "role": "admin", "status": "inactive"},
        headers=member_headers,
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["email"] == "alice@new.example.com"
    assert body["role"] == "user"
    assert body["status"] == "active"

    assert activity_actions(db_session) == ["user.updated"]
    entry = db_session.query(Activity).one()
    assert entry.actor_user_id == member.id
    assert entry.details == {
        "before": {"email": "alice@example.com"},
        "after": {"email": "alice@new.example.com"},
    }


def test_password_change_is_redacted_in_activity(api_client, db_session, member, member_headers):
    resp = api_client.patch(f"/api/users/{member.id}", json={"password": "N3wPassword!"}, headers=member_headers)

    assert resp.status_code == 200
    entry = db_session.query(Activity).one()
    assert entry.details["after"] == {"password_hash": "***"}

    login = api_client.post("/api/auth/login", json={"username": "alice", "password": "N3wPassword!"})
    assert login.status_code == 200


def test_admin_patch_can_change_role_and_tenant(api_client, db_session, admin_headers, member):
    acme = seed_tenant(db_session, "Acme")

    resp = api_client.patch(
        f"/api/users/{member.id}",
        json={"role": "editor", "tenantId": acme.id},
        headers=admin_headers,
    )

    assert resp.status_code == 200
    assert resp.json()["role"] == "editor"
    assert resp.json()["tenantId"] == acme.id


def test_patch_rejects_null_for_required_field(api_client, member, member_headers):
    resp = api_client.patch(f"/api/users/{member.id}", json={"email": None}, headers=member_headers)

    assert resp.status_code == 400
    assert resp.json()["code"] == "VALIDATION_ERROR"
    assert resp.json()["error"] == [{"field": "email", "message": "该字段不允许为 null。", "type": "null_not_allowed"}]


def test_patch_accepts_null_for_nullable_field(api_client, db_session, admin_headers):
    bob = seed_user(db_session, "bob")

    resp = api_client.patch(f"/api/users/{bob.id}", json={"fullName": None}, headers=admin_headers)

    assert resp.status_code == 200
    assert resp.json()["fullName"] is None


def test_patch_duplicate_email_conflicts(api_client, db_session, admin_headers, member):
    bob = seed_user(db_session, "bob")

    resp = api_client.patch(f"/api/users/{bob.id}", json={"email": "alice@example.com"}, headers=admin_headers)

    assert resp.status_code == 400
    assert resp.json()["code"] == "USER_EXISTS"


def test_non_admin_delete_is_forbidden_regardless_of_target(api_client, db_session, member, member_headers):
    other = seed_user(db_session, "bob")

    assert api_client.delete(f"/api/users/{other.id}", headers=member_headers).status_code == 403
    assert api_client.delete(f"/api/users/{member.id}", headers=member_headers).status_code == 403
    assert api_client.delete("/api/users/999", headers=member_headers).status_code == 403
    assert row_count(db_session, User) == 2


def test_admin_cannot_delete_self(api_client, db_session, admin, admin_headers):
    resp = api_client.delete(f"/api/users/{admin.id}", headers=admin_headers)

    assert resp.status_code == 400
    assert resp.json()["code"] == "SELF_DELETE_FORBIDDEN"
    assert row_count(db_session, User) == 1


def test_admin_deletes_user(api_client, db_session, admin, admin_headers, member):
    member_id = member.id
    resp = api_client.delete(f"/api/users/{member_id}", headers=admin_headers)

    assert resp.status_code == 204
    assert resp.content == b""
    assert row_count(db_session, User) == 1
    assert activity_actions(db_session) == ["user.deleted"]

    assert api_client.delete(f"/api/users/{member_id}", headers=admin_headers).status_code == 404


def test_deleted_user_token_is_rejected(api_client, db_session, admin_headers, member, member_headers):
    assert api_client.delete(f"/api/users/{member.id}", headers=admin_headers).status_code == 204

    assert api_client.get("/api/users", headers=member_headers).status_code == 401
