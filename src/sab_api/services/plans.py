"""套餐管理服务。"""

from sqlalchemy.orm import Session

from sab_api.dependencies import RequestContext
from sab_api.exceptions import ConflictError, NotFoundError, field_error
from sab_api.models.billing import Plan
from sab_api.schemas.billing import PlanCreateRequest, PlanUpdateRequest
from sab_api.services.activity import commit_with_activity, diff_changes
from sab_api.services.repository import Repository


def _ensure_unique_name(db: Session, name: str, exclude_id: int | None = None) -> None:
    scope = [Plan.id != exclude_id] if exclude_id is not None else []
    if Repository(db, Plan).exists(Plan.name == name, *scope):
        raise ConflictError(
            "套餐名称已存在。",
            code="PLAN_EXISTS",
            errors=[field_error("name", "套餐名称已存在。", "duplicate")],
        )


def list_plans(db: Session) -> list[Plan]:
    return Repository(db, Plan).find()


def get_plan(db: Session, plan_id: int) -> Plan:
    plan = Repository(db, Plan).get(plan_id)
    if plan is None:
        raise NotFoundError("套餐不存在。")
    return plan


def create_plan(db: Session, actor: RequestContext, payload: PlanCreateRequest) -> Plan:
    _ensure_unique_name(db, payload.name)
    plan = Repository(db, Plan).create(**payload.model_dump())
    commit_with_activity(
        db,
        actor_user_id=actor.user_id,
        tenant_id=None,
        action="plan.created",
        resource_type="plan",
        resource_id=plan.id,
        description=f"{actor.username} 创建了套餐 {plan.name}",
    )
    return plan


def update_plan(db: Session, actor: RequestContext, plan_id: int, payload: PlanUpdateRequest) -> Plan:
    repo = Repository(db, Plan)
    plan = repo.get(plan_id)
    if plan is None:
        raise NotFoundError("套餐不存在。")

    changes = payload.changes()
    if "name" in changes and changes["name"] != plan.name:
        _ensure_unique_name(db, changes["name"], exclude_id=plan.id)

    details = diff_changes(plan, changes)
    repo.update(plan, changes)
    commit_with_activity(
        db,
        actor_user_id=actor.user_id,
        tenant_id=None,
        action="plan.updated",
        resource_type="plan",
        resource_id=plan.id,
        description=f"{actor.username} 更新了套餐 {plan.name}",
        details=details,
    )
    return plan


def delete_plan(db: Session, actor: RequestContext, plan_id: int) -> None:
    """删除套餐，不检查是否仍有订阅引用。"""
    repo = Repository(db, Plan)
    plan = repo.get(plan_id)
    if plan is None:
        raise NotFoundError("套餐不存在。")

    name = plan.name
    repo.delete(plan)
    commit_with_activity(
        db,
        actor_user_id=actor.user_id,
        tenant_id=None,
        action="plan.deleted",
        resource_type="plan",
        resource_id=plan_id,
        description=f"{actor.username} 删除了套餐 {name}",
    )
