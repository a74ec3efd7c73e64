"""用户管理相关请求与响应结构。"""

from datetime import datetime
from typing import ClassVar, Literal

from pydantic import Field

from sab_api.schemas.common import BaseSchema, PatchSchema, RequestSchema

UserRoleValue = Literal["admin", "editor", "user"]
UserStatusValue = Literal["active", "inactive", "pending"]

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
USERNAME_PATTERN = r"^[A-Za-z0-9_.-]+$"


class UserCreateRequest(RequestSchema):
    """管理员创建用户请求体。"""

    username: str = Field(
        min_length=3,
        max_length=64,
        pattern=USERNAME_PATTERN,
        description="登录名，全局唯一。",
        examples=["bob"],
    )
    email: str = Field(max_length=256, pattern=EMAIL_PATTERN, description="邮箱，全局唯一。", examples=["bob@acme.com"])
    password: str = Field(min_length=6, max_length=128, description="初始密码。")
    full_name: str | None = Field(default=None, max_length=128, description="姓名。")
    role: UserRoleValue = Field(default="user", description="角色。")
    tenant_id: int | None = Field(default=None, description="所属租户 ID，为空表示平台级账号。")
    status: UserStatusValue = Field(default="active", description="用户状态。")


class UserUpdateRequest(PatchSchema):
    """更新用户请求体。非管理员提交的 role/status/tenantId 会被忽略。"""

    nullable_fields: ClassVar[frozenset[str]] = frozenset({"full_name", "tenant_id"})

    username: str | None = Field(default=None, min_length=3, max_length=64, pattern=USERNAME_PATTERN)
    email: str | None = Field(default=None, max_length=256, pattern=EMAIL_PATTERN)
    password: str | None = Field(default=None, min_length=6, max_length=128)
    full_name: str | None = Field(default=None, max_length=128)
    role: UserRoleValue | None = None
    tenant_id: int | None = None
    status: UserStatusValue | None = None


class UserData(BaseSchema):
    """用户信息（不含口令）。"""

    id: int = Field(description="用户 ID。")
    username: str = Field(description="登录名。")
    email: str = Field(description="邮箱。")
    full_name: str | None = Field(default=None, description="姓名。")
    role: str = Field(description="角色。")
    tenant_id: int | None = Field(default=None, description="所属租户 ID。")
    status: str = Field(description="用户状态。")
    last_login_at: datetime | None = Field(default=None, description="最近一次登录时间。")
    created_at: datetime = Field(description="创建时间。")
    updated_at: datetime = Field(description="更新时间。")
