from types import SimpleNamespace

import pytest

from sab_api.exceptions import Forbidden, ValidationFailed
from sab_api.services.authorization import (
    ensure_admin,
    ensure_user_delete_allowed,
    ensure_user_update_allowed,
    is_admin,
    strip_admin_only_fields,
)


def _ctx(user_id: int, role: str) -> SimpleNamespace:
    return SimpleNamespace(user_id=user_id, role=role)


def test_only_exact_admin_role_is_admin():
    assert is_admin(_ctx(1, "admin")) is True
    assert is_admin(_ctx(1, "editor")) is False
    assert is_admin(_ctx(1, "Admin")) is False


def test_ensure_admin_rejects_non_admin():
    ensure_admin(_ctx(1, "admin"))
    with pytest.raises(Forbidden):
        ensure_admin(_ctx(1, "editor"))


def test_non_admin_can_only_update_self():
    ensure_user_update_allowed(_ctx(2, "user"), 2)
    ensure_user_update_allowed(_ctx(1, "admin"), 2)
    with pytest.raises(Forbidden):
        ensure_user_update_allowed(_ctx(2, "user"), 3)


def test_admin_only_fields_are_stripped_for_non_admin():
    changes = {"email": "a@example.com", "role": "admin", "status": "inactive", "tenant_id": 9}

    assert strip_admin_only_fields(_ctx(2, "user"), changes) == {"email": "a@example.com"}
    assert strip_admin_only_fields(_ctx(1, "admin"), changes) == changes


def test_delete_requires_admin_before_self_check():
    # 非管理员删除本人也按 403 处理。
    with pytest.raises(Forbidden):
        ensure_user_delete_allowed(_ctx(2, "user"), 2)
    with pytest.raises(Forbidden):
        ensure_user_delete_allowed(_ctx(2, "user"), 5)


def test_admin_cannot_delete_self():
    with pytest.raises(ValidationFailed) as exc_info:
        ensure_user_delete_allowed(_ctx(1, "admin"), 1)
    assert exc_info.value.status_code == 400
    assert exc_info.value.detail["code"] == "SELF_DELETE_FORBIDDEN"

    ensure_user_delete_allowed(_ctx(1, "admin"), 2)
