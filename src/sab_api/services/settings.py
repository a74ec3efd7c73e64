"""键值配置服务。

`POST /settings` 为按 (tenant_id, key) 的写入或更新：已存在时只更新取值，
同一作用域内配置条数保持不变。
"""

from sqlalchemy.orm import Session

from sab_api.dependencies import RequestContext
from sab_api.exceptions import NotFoundError, ReferenceNotFound, field_error
from sab_api.models.setting import Setting
from sab_api.models.tenant import Tenant
from sab_api.schemas.setting import SettingUpdateRequest, SettingUpsertRequest
from sab_api.services.activity import commit_with_activity, diff_changes
from sab_api.services.repository import Repository


def _scope(tenant_id: int | None):
    if tenant_id is None:
        return Setting.tenant_id.is_(None)
    return Setting.tenant_id == tenant_id


def _scope_label(tenant_id: int | None) -> str:
    return "全局" if tenant_id is None else f"租户 {tenant_id}"


def list_settings(db: Session, *, tenant_id: int | None = None) -> list[Setting]:
    criteria = [Setting.tenant_id == tenant_id] if tenant_id is not None else []
    return Repository(db, Setting).find(*criteria, order_by=(Setting.key, Setting.id))


def get_setting(db: Session, setting_id: int) -> Setting:
    setting = Repository(db, Setting).get(setting_id)
    if setting is None:
        raise NotFoundError("配置项不存在。")
    return setting


def upsert_setting(db: Session, actor: RequestContext, payload: SettingUpsertRequest) -> tuple[Setting, bool]:
    """写入配置，返回 (配置项, 是否新建)。"""
    if payload.tenant_id is not None and Repository(db, Tenant).get(payload.tenant_id) is None:
        raise ReferenceNotFound(
            "配置所属租户不存在。",
            errors=[field_error("tenantId", f"租户 {payload.tenant_id} 不存在。", "not_found")],
        )

    repo = Repository(db, Setting)
    setting = repo.first(_scope(payload.tenant_id), Setting.key == payload.key)
    if setting is not None:
        details = diff_changes(setting, {"value": payload.value})
        repo.update(setting, {"value": payload.value})
        commit_with_activity(
            db,
            actor_user_id=actor.user_id,
            tenant_id=setting.tenant_id,
            action="setting.updated",
            resource_type="setting",
            resource_id=setting.id,
            description=f"{actor.username} 更新了{_scope_label(setting.tenant_id)}配置 {setting.key}",
            details=details,
        )
        return setting, False

    setting = repo.create(tenant_id=payload.tenant_id, key=payload.key, value=payload.value)
    commit_with_activity(
        db,
        actor_user_id=actor.user_id,
        tenant_id=setting.tenant_id,
        action="setting.created",
        resource_type="setting",
        resource_id=setting.id,
        description=f"{actor.username} 新增了{_scope_label(setting.tenant_id)}配置 {setting.key}",
    )
    return setting, True


def update_setting(db: Session, actor: RequestContext, setting_id: int, payload: SettingUpdateRequest) -> Setting:
    repo = Repository(db, Setting)
    setting = repo.get(setting_id)
    if setting is None:
        raise NotFoundError("配置项不存在。")

    changes = payload.changes()
    details = diff_changes(setting, changes)
    repo.update(setting, changes)
    commit_with_activity(
        db,
        actor_user_id=actor.user_id,
        tenant_id=setting.tenant_id,
        action="setting.updated",
        resource_type="setting",
        resource_id=setting.id,
        description=f"{actor.username} 更新了{_scope_label(setting.tenant_id)}配置 {setting.key}",
        details=details,
    )
    return setting


def delete_setting(db: Session, actor: RequestContext, setting_id: int) -> None:
    repo = Repository(db, Setting)
    setting = repo.get(setting_id)
    if setting is None:
        raise NotFoundError("配置项不存在。")

    tenant_id, key = setting.tenant_id, setting.key
    repo.delete(setting)
    commit_with_activity(
        db,
        actor_user_id=actor.user_id,
        tenant_id=tenant_id,
        action="setting.deleted",
        resource_type="setting",
        resource_id=setting_id,
        description=f"{actor.username} 删除了{_scope_label(tenant_id)}配置 {key}",
    )
