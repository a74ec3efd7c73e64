"""套餐与订阅模型。"""

from datetime import datetime

from sqlalchemy import JSON, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sab_api.models.base import Base, IntegerPrimaryKeyMixin, TimestampMixin, utc_now
from sab_api.models.enums import PlanInterval, PlanStatus, SubscriptionStatus


class Plan(Base, IntegerPrimaryKeyMixin, TimestampMixin):
    """可售卖套餐，与租户无关。"""

    __tablename__ = "plans"

    name: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text)
    # 价格，以最小货币单位（如分）存储。
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    # 计费周期（month/year）。
    interval: Mapped[str] = mapped_column(String(16), nullable=False, default=PlanInterval.MONTH)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default=PlanStatus.ACTIVE)
    # 套餐特性列表。
    features: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)


class Subscription(Base, IntegerPrimaryKeyMixin, TimestampMixin):
    """租户与套餐的绑定关系。

    tenant_id/plan_id 仅在写入时校验存在性，不声明外键：删除租户或套餐不受订阅约束。
    """

    __tablename__ = "subscriptions"

    tenant_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    plan_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default=SubscriptionStatus.ACTIVE)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)
    # 取消订阅时写入。
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    renewal_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
