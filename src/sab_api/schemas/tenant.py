"""租户相关请求结构。"""

from datetime import datetime
from typing import ClassVar, Literal

from pydantic import Field

from sab_api.schemas.common import BaseSchema, PatchSchema, RequestSchema

TenantStatusValue = Literal["active", "inactive", "trial"]
DOMAIN_PATTERN = r"^[A-Za-z0-9]([A-Za-z0-9-]*[A-Za-z0-9])?(\.[A-Za-z0-9]([A-Za-z0-9-]*[A-Za-z0-9])?)+$"


class TenantCreateRequest(RequestSchema):
    """创建租户请求体。"""

    name: str = Field(min_length=2, max_length=128, description="租户名称，全局唯一。", examples=["Acme"])
    domain: str | None = Field(
        default=None,
        max_length=255,
        pattern=DOMAIN_PATTERN,
        description="租户域名，填写时全局唯一。",
        examples=["acme.com"],
    )
    status: TenantStatusValue = Field(default="active", description="租户状态。")


class TenantUpdateRequest(PatchSchema):
    """更新租户请求体。"""

    nullable_fields: ClassVar[frozenset[str]] = frozenset({"domain"})

    name: str | None = Field(default=None, min_length=2, max_length=128, description="新的租户名称。")
    domain: str | None = Field(default=None, max_length=255, pattern=DOMAIN_PATTERN, description="新的租户域名。")
    status: TenantStatusValue | None = Field(default=None, description="租户状态。")


class TenantData(BaseSchema):
    """租户信息。"""

    id: int = Field(description="租户 ID。")
    name: str = Field(description="租户名称。")
    domain: str | None = Field(default=None, description="租户域名。")
    status: str = Field(description="租户状态。")
    created_at: datetime = Field(description="创建时间。")
    updated_at: datetime = Field(description="更新时间。")
