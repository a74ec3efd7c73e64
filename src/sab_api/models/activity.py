"""操作日志模型。"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sab_api.models.base import Base, IntegerPrimaryKeyMixin, utc_now


class Activity(Base, IntegerPrimaryKeyMixin):
    """写操作审计记录，只追加不修改。

    actor_user_id/tenant_id 仅做弱引用，不声明外键：删除用户或租户不受审计历史约束。
    """

    __tablename__ = "activities"

    # 操作人用户 ID。
    actor_user_id: Mapped[int | None] = mapped_column(Integer, index=True)
    # 受影响租户 ID，平台级资源为空。
    tenant_id: Mapped[int | None] = mapped_column(Integer, index=True)
    # 动作编码，例如 user.created / tenant.deleted。
    action: Mapped[str] = mapped_column(String(128), nullable=False)
    # 资源类型，例如 user/tenant/plan。
    resource_type: Mapped[str] = mapped_column(String(64), nullable=False)
    resource_id: Mapped[int | None] = mapped_column(Integer)
    # 面向人的描述。
    description: Mapped[str] = mapped_column(Text, nullable=False)
    # 变更字段快照（敏感字段已脱敏）。
    details: Mapped[dict[str, Any] | None] = mapped_column(JSON)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False, index=True
    )
