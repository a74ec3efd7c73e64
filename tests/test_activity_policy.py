import logging

import pytest
from sqlalchemy.exc import OperationalError

from sab_api.core.config import get_settings
from sab_api.models import Activity, Tenant
from sab_api.schemas.tenant import TenantCreateRequest
from sab_api.services import activity as activity_module
from sab_api.services import tenants as tenant_service

from conftest import context_for, row_count


def _broken_recorder(*_args, **_kwargs):
    raise OperationalError("INSERT INTO activities", {}, Exception("disk I/O error"))


def test_strict_policy_records_in_same_transaction(db_session, admin):
    tenant_service.create_tenant(db_session, context_for(admin), TenantCreateRequest(name="Acme"))

    assert row_count(db_session, Tenant) == 1
    entry = db_session.query(Activity).one()
    assert entry.action == "tenant.created"
    assert entry.actor_user_id == admin.id


def test_strict_policy_rolls_back_mutation_when_recording_fails(db_session, admin, monkeypatch):
    ctx = context_for(admin)
    monkeypatch.setattr(activity_module, "record_activity", _broken_recorder)

    with pytest.raises(OperationalError):
        tenant_service.create_tenant(db_session, ctx, TenantCreateRequest(name="Acme"))
    db_session.rollback()

    assert row_count(db_session, Tenant) == 0
    assert row_count(db_session, Activity) == 0


def test_best_effort_policy_keeps_mutation_when_recording_fails(db_session, admin, monkeypatch, caplog):
    monkeypatch.setenv("SAB_ACTIVITY_POLICY", "best_effort")
    get_settings.cache_clear()
    ctx = context_for(admin)
    monkeypatch.setattr(activity_module, "record_activity", _broken_recorder)

    with caplog.at_level(logging.WARNING, logger="sab_api.activity"):
        tenant = tenant_service.create_tenant(db_session, ctx, TenantCreateRequest(name="Acme"))

    assert tenant.name == "Acme"
    assert row_count(db_session, Tenant) == 1
    assert row_count(db_session, Activity) == 0
    assert "tenant.created" in caplog.text


def test_best_effort_policy_records_when_storage_is_healthy(db_session, admin, monkeypatch):
    monkeypatch.setenv("SAB_ACTIVITY_POLICY", "best_effort")
    get_settings.cache_clear()

    tenant_service.create_tenant(db_session, context_for(admin), TenantCreateRequest(name="Acme"))

    assert [entry.action for entry in db_session.query(Activity).all()] == ["tenant.created"]
