"""角色权限矩阵维护服务。"""

from sqlalchemy.orm import Session

from sab_api.dependencies import RequestContext
from sab_api.exceptions import ConflictError, NotFoundError, field_error
from sab_api.models.permission import Role
from sab_api.schemas.role import RoleCreateRequest, RoleUpdateRequest
from sab_api.services.activity import commit_with_activity, diff_changes
from sab_api.services.repository import Repository


def list_roles(db: Session) -> list[Role]:
    return Repository(db, Role).find(order_by=(Role.name,))


def get_role(db: Session, role_id: int) -> Role:
    role = Repository(db, Role).get(role_id)
    if role is None:
        raise NotFoundError("角色不存在。")
    return role


def create_role(db: Session, actor: RequestContext, payload: RoleCreateRequest) -> Role:
    """为内置角色写入权限矩阵，每个角色仅允许一份配置。"""
    repo = Repository(db, Role)
    if repo.exists(Role.name == payload.name):
        raise ConflictError(
            "角色权限已配置。",
            code="ROLE_EXISTS",
            errors=[field_error("name", f"角色 {payload.name} 已存在。", "duplicate")],
        )

    role = repo.create(**payload.model_dump())
    commit_with_activity(
        db,
        actor_user_id=actor.user_id,
        tenant_id=None,
        action="role.created",
        resource_type="role",
        resource_id=role.id,
        description=f"{actor.username} 配置了角色 {role.name} 的权限",
    )
    return role


def update_role(db: Session, actor: RequestContext, role_id: int, payload: RoleUpdateRequest) -> Role:
    repo = Repository(db, Role)
    role = repo.get(role_id)
    if role is None:
        raise NotFoundError("角色不存在。")

    changes = payload.changes()
    details = diff_changes(role, changes)
    repo.update(role, changes)
    commit_with_activity(
        db,
        actor_user_id=actor.user_id,
        tenant_id=None,
        action="role.updated",
        resource_type="role",
        resource_id=role.id,
        description=f"{actor.username} 更新了角色 {role.name} 的权限",
        details=details,
    )
    return role


def delete_role(db: Session, actor: RequestContext, role_id: int) -> None:
    """删除角色配置后该角色回退到内置默认矩阵。"""
    repo = Repository(db, Role)
    role = repo.get(role_id)
    if role is None:
        raise NotFoundError("角色不存在。")

    name = role.name
    repo.delete(role)
    commit_with_activity(
        db,
        actor_user_id=actor.user_id,
        tenant_id=None,
        action="role.deleted",
        resource_type="role",
        resource_id=role_id,
        description=f"{actor.username} 删除了角色 {name} 的权限配置",
    )
