"""租户管理服务。"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sab_api.dependencies import RequestContext
from sab_api.exceptions import ConflictError, NotFoundError, field_error
from sab_api.models.tenant import Tenant, User
from sab_api.schemas.tenant import TenantCreateRequest, TenantUpdateRequest
from sab_api.services.activity import commit_with_activity, diff_changes
from sab_api.services.repository import Repository


def _ensure_unique(db: Session, *, name: str | None, domain: str | None, exclude_id: int | None = None) -> None:
    """租户名称与域名全局唯一。"""
    repo = Repository(db, Tenant)
    scope = [Tenant.id != exclude_id] if exclude_id is not None else []
    errors = []
    if name is not None and repo.exists(Tenant.name == name, *scope):
        errors.append(field_error("name", "租户名称已存在。", "duplicate"))
    if domain is not None and repo.exists(Tenant.domain == domain, *scope):
        errors.append(field_error("domain", "租户域名已存在。", "duplicate"))
    if errors:
        raise ConflictError("租户名称或域名已存在。", code="TENANT_EXISTS", errors=errors)


def _has_users_error(tenant_id: int, user_count: int | None = None) -> ConflictError:
    details = {"tenantId": tenant_id}
    if user_count is not None:
        details["userCount"] = user_count
    return ConflictError("租户下仍有关联用户，无法删除。", code="TENANT_HAS_USERS", details=details)


def list_tenants(db: Session) -> list[Tenant]:
    return Repository(db, Tenant).find()


def get_tenant(db: Session, tenant_id: int) -> Tenant:
    tenant = Repository(db, Tenant).get(tenant_id)
    if tenant is None:
        raise NotFoundError("租户不存在。")
    return tenant


def create_tenant(db: Session, actor: RequestContext, payload: TenantCreateRequest) -> Tenant:
    _ensure_unique(db, name=payload.name, domain=payload.domain)
    tenant = Repository(db, Tenant).create(**payload.model_dump())
    commit_with_activity(
        db,
        actor_user_id=actor.user_id,
        tenant_id=tenant.id,
        action="tenant.created",
        resource_type="tenant",
        resource_id=tenant.id,
        description=f"{actor.username} 创建了租户 {tenant.name}",
    )
    return tenant


def update_tenant(db: Session, actor: RequestContext, tenant_id: int, payload: TenantUpdateRequest) -> Tenant:
    repo = Repository(db, Tenant)
    tenant = repo.get(tenant_id)
    if tenant is None:
        raise NotFoundError("租户不存在。")

    changes = payload.changes()
    _ensure_unique(
        db,
        name=changes.get("name") if changes.get("name") != tenant.name else None,
        domain=changes.get("domain") if changes.get("domain") != tenant.domain else None,
        exclude_id=tenant.id,
    )
    details = diff_changes(tenant, changes)
    repo.update(tenant, changes)
    commit_with_activity(
        db,
        actor_user_id=actor.user_id,
        tenant_id=tenant.id,
        action="tenant.updated",
        resource_type="tenant",
        resource_id=tenant.id,
        description=f"{actor.username} 更新了租户 {tenant.name}",
        details=details,
    )
    return tenant


def delete_tenant(db: Session, actor: RequestContext, tenant_id: int) -> None:
    """删除租户。

    先对租户行加排他锁再检查关联用户，并发创建用户需要等待该锁；
    存储层的 RESTRICT 外键兜底（SQLite 下行锁为空操作，仅依赖外键）。
    订阅不做引用检查。
    """
    repo = Repository(db, Tenant)
    tenant = repo.lock(tenant_id)
    if tenant is None:
        raise NotFoundError("租户不存在。")

    user_count = Repository(db, User).count(User.tenant_id == tenant_id)
    if user_count:
        raise _has_users_error(tenant_id, user_count)

    name = tenant.name
    try:
        repo.delete(tenant)
    except IntegrityError as exc:
        db.rollback()
        raise _has_users_error(tenant_id) from exc

    commit_with_activity(
        db,
        actor_user_id=actor.user_id,
        tenant_id=tenant_id,
        action="tenant.deleted",
        resource_type="tenant",
        resource_id=tenant_id,
        description=f"{actor.username} 删除了租户 {name}",
    )
