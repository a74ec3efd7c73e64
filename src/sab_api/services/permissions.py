"""角色权限矩阵（数据库驱动，仅供前端做界面控制）。

接口鉴权始终以用户角色字面值为准，见 `services.authorization`。
"""

from typing import Any

from sqlalchemy.orm import Session

from sab_api.models.enums import PermissionResource, UserRole
from sab_api.models.permission import Role
from sab_api.services.repository import Repository

PERMISSION_OPERATIONS: tuple[str, ...] = ("create", "read", "update", "delete")

# 编辑者可更新的资源。
_EDITOR_WRITABLE = {PermissionResource.SUBSCRIPTIONS, PermissionResource.SETTINGS}


def _entry(resource: str, *, create: bool, read: bool, update: bool, delete: bool) -> dict[str, Any]:
    return {"resource": resource, "create": create, "read": read, "update": update, "delete": delete}


def _default_matrix(role: str) -> list[dict[str, Any]]:
    entries = []
    for resource in sorted(item.value for item in PermissionResource):
        if role == UserRole.ADMIN:
            entries.append(_entry(resource, create=True, read=True, update=True, delete=True))
        elif role == UserRole.EDITOR:
            entries.append(
                _entry(resource, create=False, read=True, update=resource in _EDITOR_WRITABLE, delete=False)
            )
        else:
            entries.append(_entry(resource, create=False, read=True, update=False, delete=False))
    return entries


def permission_catalog() -> dict[str, list[str]]:
    """返回可配置的资源与操作目录。"""
    return {
        "resources": sorted(item.value for item in PermissionResource),
        "operations": list(PERMISSION_OPERATIONS),
    }


def effective_permissions(db: Session, role: str) -> tuple[str, list[dict[str, Any]]]:
    """返回角色的有效权限矩阵及其来源。

    规则：
    1. 角色已配置矩阵时，使用数据库配置。
    2. 未配置时，回退到内置默认映射。
    """
    stored = Repository(db, Role).first(Role.name == role)
    if stored is not None:
        return "stored", sorted(stored.permissions, key=lambda entry: entry["resource"])
    return "default", _default_matrix(role)
