"""角色权限矩阵请求与响应结构。"""

from datetime import datetime
from typing import ClassVar, Literal

from pydantic import Field, field_validator

from sab_api.schemas.common import BaseSchema, PatchSchema, RequestSchema
from sab_api.schemas.user import UserRoleValue

PermissionResourceValue = Literal["users", "tenants", "plans", "subscriptions", "settings", "roles", "activities"]


class PermissionEntry(RequestSchema):
    """单个资源的 CRUD 权限。"""

    resource: PermissionResourceValue = Field(description="资源名称。")
    create: bool = False
    read: bool = True
    update: bool = False
    delete: bool = False


def _normalize_entries(value: list[PermissionEntry] | None) -> list[PermissionEntry] | None:
    """资源不允许重复，并按资源名排序。"""
    if value is None:
        return value
    resources = [entry.resource for entry in value]
    duplicated = sorted({item for item in resources if resources.count(item) > 1})
    if duplicated:
        raise ValueError(f"duplicated resources: {', '.join(duplicated)}")
    return sorted(value, key=lambda entry: entry.resource)


class RoleCreateRequest(RequestSchema):
    """为内置角色配置权限矩阵。"""

    name: UserRoleValue = Field(description="内置角色名。")
    description: str | None = Field(default=None, max_length=512)
    permissions: list[PermissionEntry] = Field(default_factory=list)

    @field_validator("permissions")
    @classmethod
    def normalize_permissions(cls, value: list[PermissionEntry]) -> list[PermissionEntry]:
        return _normalize_entries(value)


class RoleUpdateRequest(PatchSchema):
    """更新角色说明或权限矩阵，未提供的字段保持原值。"""

    nullable_fields: ClassVar[frozenset[str]] = frozenset({"description"})

    description: str | None = Field(default=None, max_length=512)
    permissions: list[PermissionEntry] | None = None

    @field_validator("permissions")
    @classmethod
    def normalize_permissions(cls, value: list[PermissionEntry] | None) -> list[PermissionEntry] | None:
        return _normalize_entries(value)


class PermissionEntryData(BaseSchema):
    resource: str
    create: bool
    read: bool
    update: bool
    delete: bool


class RoleData(BaseSchema):
    """角色权限矩阵。"""

    id: int
    name: str
    description: str | None = None
    permissions: list[PermissionEntryData]
    created_at: datetime
    updated_at: datetime


class PermissionCatalogData(BaseSchema):
    """可配置资源与操作目录。"""

    resources: list[str] = Field(description="资源列表。")
    operations: list[str] = Field(description="操作列表。")


class PermissionSnapshotData(BaseSchema):
    """当前登录用户的有效权限矩阵。"""

    role: str = Field(description="当前角色。")
    source: Literal["stored", "default"] = Field(description="矩阵来源：已配置或内置默认。")
    is_admin: bool = Field(description="接口鉴权是否按管理员放行。")
    permissions: list[PermissionEntryData]
