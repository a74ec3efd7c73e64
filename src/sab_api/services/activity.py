"""操作日志服务。

写入策略由 `SAB_ACTIVITY_POLICY` 决定：
1. strict：日志与业务变更同一事务提交，日志写入失败则业务变更一并回滚。
2. best_effort：业务变更先提交，日志写入失败仅回滚日志并记录告警。
"""

import logging
from typing import Any

from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sab_api.core.config import get_settings
from sab_api.models.activity import Activity
from sab_api.services.repository import Repository

logger = logging.getLogger("sab_api.activity")

REDACTED_FIELDS = frozenset({"password", "password_hash"})


def _redact(values: dict[str, Any]) -> dict[str, Any]:
    return {key: ("***" if key in REDACTED_FIELDS else value) for key, value in values.items()}


def _jsonable(value: Any) -> Any:
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return value


def diff_changes(entity: Any, changes: dict[str, Any]) -> dict[str, Any] | None:
    """对比实体当前值与待写入值，返回实际变化字段的前后快照。"""
    before: dict[str, Any] = {}
    after: dict[str, Any] = {}
    for name, value in changes.items():
        current = getattr(entity, name, None)
        if current != value:
            before[name] = _jsonable(current)
            after[name] = _jsonable(value)
    if not after:
        return None
    return {"before": _redact(before), "after": _redact(after)}


def record_activity(
    db: Session,
    *,
    actor_user_id: int | None,
    tenant_id: int | None,
    action: str,
    resource_type: str,
    resource_id: int | None,
    description: str,
    details: dict[str, Any] | None = None,
) -> Activity:
    """追加一条操作日志（不提交）。"""
    return Repository(db, Activity).create(
        actor_user_id=actor_user_id,
        tenant_id=tenant_id,
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        description=description,
        details=details,
    )


def commit_with_activity(db: Session, **activity: Any) -> Activity | None:
    """按配置的写入策略提交当前业务变更并记录操作日志。

    best_effort 模式下日志写入失败时返回 None。
    """
    if get_settings().activity_policy == "best_effort":
        db.commit()
        try:
            entry = record_activity(db, **activity)
            db.commit()
            return entry
        except SQLAlchemyError:
            db.rollback()
            logger.warning(
                "activity %s for %s#%s not recorded",
                activity.get("action"),
                activity.get("resource_type"),
                activity.get("resource_id"),
                exc_info=True,
            )
            return None

    entry = record_activity(db, **activity)
    db.commit()
    return entry


def list_activities(db: Session, *, limit: int) -> list[Activity]:
    """按时间倒序返回最近的操作日志，同一时间按 ID 倒序。"""
    return Repository(db, Activity).find(order_by=(desc(Activity.created_at), desc(Activity.id)), limit=limit)
