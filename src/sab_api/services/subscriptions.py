"""订阅管理服务。

订阅状态流转（pending → active → past_due/canceled）不做强制校验，
取消订阅且未指定结束时间时自动写入当前时间。
"""

from typing import Any

from sqlalchemy.orm import Session

from sab_api.dependencies import RequestContext
from sab_api.exceptions import NotFoundError, ReferenceNotFound, field_error
from sab_api.models.base import utc_now
from sab_api.models.billing import Plan, Subscription
from sab_api.models.enums import SubscriptionStatus
from sab_api.models.tenant import Tenant
from sab_api.schemas.billing import SubscriptionCreateRequest, SubscriptionUpdateRequest
from sab_api.services.activity import commit_with_activity, diff_changes
from sab_api.services.repository import Repository


def _ensure_references(db: Session, *, tenant_id: int | None, plan_id: int | None) -> None:
    """校验订阅引用的租户与套餐存在。"""
    errors = []
    if tenant_id is not None and Repository(db, Tenant).get(tenant_id) is None:
        errors.append(field_error("tenantId", f"租户 {tenant_id} 不存在。", "not_found"))
    if plan_id is not None and Repository(db, Plan).get(plan_id) is None:
        errors.append(field_error("planId", f"套餐 {plan_id} 不存在。", "not_found"))
    if errors:
        raise ReferenceNotFound("订阅引用的租户或套餐不存在。", errors=errors)


def _apply_cancel_end_date(values: dict[str, Any]) -> None:
    if values.get("status") == SubscriptionStatus.CANCELED and values.get("end_date") is None:
        values["end_date"] = utc_now()


def list_subscriptions(db: Session, *, tenant_id: int | None = None) -> list[Subscription]:
    criteria = [Subscription.tenant_id == tenant_id] if tenant_id is not None else []
    return Repository(db, Subscription).find(*criteria)


def get_subscription(db: Session, subscription_id: int) -> Subscription:
    subscription = Repository(db, Subscription).get(subscription_id)
    if subscription is None:
        raise NotFoundError("订阅不存在。")
    return subscription


def create_subscription(db: Session, actor: RequestContext, payload: SubscriptionCreateRequest) -> Subscription:
    _ensure_references(db, tenant_id=payload.tenant_id, plan_id=payload.plan_id)

    values = payload.model_dump()
    if values["start_date"] is None:
        # 交给模型默认值填充当前时间。
        values.pop("start_date")
    _apply_cancel_end_date(values)

    subscription = Repository(db, Subscription).create(**values)
    commit_with_activity(
        db,
        actor_user_id=actor.user_id,
        tenant_id=subscription.tenant_id,
        action="subscription.created",
        resource_type="subscription",
        resource_id=subscription.id,
        description=f"{actor.username} 为租户 {subscription.tenant_id} 创建了订阅 {subscription.id}",
    )
    return subscription


def update_subscription(
    db: Session,
    actor: RequestContext,
    subscription_id: int,
    payload: SubscriptionUpdateRequest,
) -> Subscription:
    repo = Repository(db, Subscription)
    subscription = repo.get(subscription_id)
    if subscription is None:
        raise NotFoundError("订阅不存在。")

    changes = payload.changes()
    _ensure_references(
        db,
        tenant_id=changes.get("tenant_id") if changes.get("tenant_id") != subscription.tenant_id else None,
        plan_id=changes.get("plan_id") if changes.get("plan_id") != subscription.plan_id else None,
    )
    # 已取消的订阅重复提交 canceled 时保留原取消时间。
    if (
        changes.get("status") == SubscriptionStatus.CANCELED
        and "end_date" not in changes
        and subscription.status != SubscriptionStatus.CANCELED
    ):
        changes["end_date"] = utc_now()

    details = diff_changes(subscription, changes)
    repo.update(subscription, changes)
    commit_with_activity(
        db,
        actor_user_id=actor.user_id,
        tenant_id=subscription.tenant_id,
        action="subscription.updated",
        resource_type="subscription",
        resource_id=subscription.id,
        description=f"{actor.username} 更新了订阅 {subscription.id}",
        details=details,
    )
    return subscription


def delete_subscription(db: Session, actor: RequestContext, subscription_id: int) -> None:
    repo = Repository(db, Subscription)
    subscription = repo.get(subscription_id)
    if subscription is None:
        raise NotFoundError("订阅不存在。")

    tenant_id = subscription.tenant_id
    repo.delete(subscription)
    commit_with_activity(
        db,
        actor_user_id=actor.user_id,
        tenant_id=tenant_id,
        action="subscription.deleted",
        resource_type="subscription",
        resource_id=subscription_id,
        description=f"{actor.username} 删除了订阅 {subscription_id}",
    )
