"""键值配置请求结构。"""

from datetime import datetime
from typing import ClassVar

from pydantic import Field

from sab_api.schemas.common import BaseSchema, PatchSchema, RequestSchema


class SettingUpsertRequest(RequestSchema):
    """写入配置请求体，按 (tenantId, key) 存在则更新。"""

    tenant_id: int | None = Field(default=None, description="租户 ID，为空表示全局配置。")
    key: str = Field(min_length=1, max_length=128, description="配置键。", examples=["theme"])
    value: str | None = Field(default=None, description="配置值。", examples=["dark"])


class SettingUpdateRequest(PatchSchema):
    """按 ID 更新配置值。"""

    nullable_fields: ClassVar[frozenset[str]] = frozenset({"value"})

    value: str | None = None


class SettingData(BaseSchema):
    """配置项。"""

    id: int
    tenant_id: int | None = None
    key: str
    value: str | None = None
    created_at: datetime
    updated_at: datetime
