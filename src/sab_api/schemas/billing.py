"""套餐与订阅请求结构。"""

from datetime import datetime
from typing import ClassVar, Literal

from pydantic import Field

from sab_api.schemas.common import BaseSchema, PatchSchema, RequestSchema

PlanIntervalValue = Literal["month", "year"]
PlanStatusValue = Literal["active", "inactive"]
SubscriptionStatusValue = Literal["pending", "active", "past_due", "canceled"]


class PlanCreateRequest(RequestSchema):
    """创建套餐请求体。"""

    name: str = Field(min_length=1, max_length=128, description="套餐名称，全局唯一。", examples=["Pro"])
    description: str | None = Field(default=None, description="套餐说明。")
    price: int = Field(ge=0, description="价格，最小货币单位（如分）。", examples=[4900])
    interval: PlanIntervalValue = Field(default="month", description="计费周期。")
    status: PlanStatusValue = Field(default="active", description="上架状态。")
    features: list[str] = Field(default_factory=list, description="特性列表。")


class PlanUpdateRequest(PatchSchema):
    """更新套餐请求体。"""

    nullable_fields: ClassVar[frozenset[str]] = frozenset({"description"})

    name: str | None = Field(default=None, min_length=1, max_length=128)
    description: str | None = None
    price: int | None = Field(default=None, ge=0)
    interval: PlanIntervalValue | None = None
    status: PlanStatusValue | None = None
    features: list[str] | None = None


class PlanData(BaseSchema):
    """套餐信息。"""

    id: int
    name: str
    description: str | None = None
    price: int = Field(description="价格，最小货币单位。")
    interval: str
    status: str
    features: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class SubscriptionCreateRequest(RequestSchema):
    """创建订阅请求体。"""

    tenant_id: int = Field(description="订阅租户 ID。")
    plan_id: int = Field(description="订阅套餐 ID。")
    status: SubscriptionStatusValue = Field(default="active", description="订阅状态。")
    start_date: datetime | None = Field(default=None, description="开始时间，缺省为当前时间。")
    end_date: datetime | None = Field(default=None, description="结束时间。")
    renewal_date: datetime | None = Field(default=None, description="下次续费时间。")


class SubscriptionUpdateRequest(PatchSchema):
    """更新订阅请求体。状态改为 canceled 且未提供 endDate 时自动写入当前时间。"""

    nullable_fields: ClassVar[frozenset[str]] = frozenset({"end_date", "renewal_date"})

    tenant_id: int | None = None
    plan_id: int | None = None
    status: SubscriptionStatusValue | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    renewal_date: datetime | None = None


class SubscriptionData(BaseSchema):
    """订阅信息。"""

    id: int
    tenant_id: int
    plan_id: int
    status: str
    start_date: datetime
    end_date: datetime | None = None
    renewal_date: datetime | None = None
    created_at: datetime
    updated_at: datetime
