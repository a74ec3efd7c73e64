"""操作日志与仪表盘响应结构。"""

from datetime import datetime
from typing import Any

from pydantic import Field

from sab_api.schemas.common import BaseSchema


class ActivityData(BaseSchema):
    """操作日志条目。"""

    id: int
    actor_user_id: int | None = Field(default=None, description="操作人用户 ID。")
    tenant_id: int | None = Field(default=None, description="受影响租户 ID。")
    action: str = Field(description="动作编码，例如 user.created。")
    resource_type: str
    resource_id: int | None = None
    description: str
    details: dict[str, Any] | None = None
    created_at: datetime


class DashboardStatsData(BaseSchema):
    """仪表盘汇总统计。"""

    total_users: int
    active_users: int
    total_tenants: int
    active_tenants: int
    total_plans: int
