"""用户管理服务。

包含管理员维护用户、用户自助注册与本地账号登录。
"""

import logging

from sqlalchemy.orm import Session

from sab_api.core.config import get_settings
from sab_api.dependencies import RequestContext
from sab_api.exceptions import ConflictError, NotFoundError, ReferenceNotFound, Unauthenticated, field_error
from sab_api.models.base import utc_now
from sab_api.models.enums import UserRole, UserStatus
from sab_api.models.tenant import Tenant, User
from sab_api.schemas.auth import AuthRegisterRequest
from sab_api.schemas.user import UserCreateRequest, UserUpdateRequest
from sab_api.services.activity import commit_with_activity, diff_changes
from sab_api.services.authorization import (
    ensure_user_delete_allowed,
    ensure_user_update_allowed,
    strip_admin_only_fields,
)
from sab_api.services.local_auth import hash_password, needs_rehash, verify_password
from sab_api.services.repository import Repository

logger = logging.getLogger("sab_api.users")


def _ensure_unique(db: Session, *, username: str | None, email: str | None, exclude_id: int | None = None) -> None:
    """登录名与邮箱全局唯一。"""
    repo = Repository(db, User)
    scope = [User.id != exclude_id] if exclude_id is not None else []
    errors = []
    if username is not None and repo.exists(User.username == username, *scope):
        errors.append(field_error("username", "登录名已被占用。", "duplicate"))
    if email is not None and repo.exists(User.email == email, *scope):
        errors.append(field_error("email", "邮箱已被占用。", "duplicate"))
    if errors:
        raise ConflictError("用户名或邮箱已存在。", code="USER_EXISTS", errors=errors)


def _ensure_tenant(db: Session, tenant_id: int | None) -> None:
    """校验所属租户存在，并持有租户行共享锁直到事务结束。"""
    if tenant_id is None:
        return
    if Repository(db, Tenant).lock(tenant_id, key_share=True) is None:
        raise ReferenceNotFound(
            "所属租户不存在。",
            errors=[field_error("tenantId", f"租户 {tenant_id} 不存在。", "not_found")],
        )


def list_users(db: Session, *, tenant_id: int | None = None) -> list[User]:
    criteria = [User.tenant_id == tenant_id] if tenant_id is not None else []
    return Repository(db, User).find(*criteria)


def get_user(db: Session, user_id: int) -> User:
    user = Repository(db, User).get(user_id)
    if user is None:
        raise NotFoundError("用户不存在。")
    return user


def create_user(db: Session, actor: RequestContext, payload: UserCreateRequest) -> User:
    """管理员创建用户。"""
    _ensure_unique(db, username=payload.username, email=payload.email)
    _ensure_tenant(db, payload.tenant_id)

    values = payload.model_dump(exclude={"password"})
    user = Repository(db, User).create(password_hash=hash_password(payload.password), **values)
    commit_with_activity(
        db,
        actor_user_id=actor.user_id,
        tenant_id=user.tenant_id,
        action="user.created",
        resource_type="user",
        resource_id=user.id,
        description=f"{actor.username} 创建了用户 {user.username}",
    )
    return user


def update_user(db: Session, actor: RequestContext, user_id: int, payload: UserUpdateRequest) -> User:
    """局部更新用户；非管理员只能修改本人且不能修改角色、状态与租户。"""
    ensure_user_update_allowed(actor, user_id)
    repo = Repository(db, User)
    user = repo.get(user_id)
    if user is None:
        raise NotFoundError("用户不存在。")

    changes = strip_admin_only_fields(actor, payload.changes())
    password = changes.pop("password", None)
    if password is not None:
        changes["password_hash"] = hash_password(password)

    _ensure_unique(
        db,
        username=changes.get("username") if changes.get("username") != user.username else None,
        email=changes.get("email") if changes.get("email") != user.email else None,
        exclude_id=user.id,
    )
    if "tenant_id" in changes and changes["tenant_id"] != user.tenant_id:
        _ensure_tenant(db, changes["tenant_id"])

    details = diff_changes(user, changes)
    repo.update(user, changes)
    commit_with_activity(
        db,
        actor_user_id=actor.user_id,
        tenant_id=user.tenant_id,
        action="user.updated",
        resource_type="user",
        resource_id=user.id,
        description=f"{actor.username} 更新了用户 {user.username}",
        details=details,
    )
    return user


def delete_user(db: Session, actor: RequestContext, user_id: int) -> None:
    """管理员删除用户，不允许删除当前登录账号。"""
    ensure_user_delete_allowed(actor, user_id)
    repo = Repository(db, User)
    user = repo.get(user_id)
    if user is None:
        raise NotFoundError("用户不存在。")

    username, tenant_id = user.username, user.tenant_id
    repo.delete(user)
    commit_with_activity(
        db,
        actor_user_id=actor.user_id,
        tenant_id=tenant_id,
        action="user.deleted",
        resource_type="user",
        resource_id=user_id,
        description=f"{actor.username} 删除了用户 {username}",
    )


def register_user(db: Session, payload: AuthRegisterRequest) -> User:
    """自助注册本地账号。

    系统中尚无任何用户且开启 `SAB_AUTH_FIRST_USER_ADMIN` 时，首个账号授予管理员角色。
    """
    _ensure_unique(db, username=payload.username, email=payload.email)

    repo = Repository(db, User)
    role = UserRole.USER
    if get_settings().auth_first_user_admin and repo.count() == 0:
        role = UserRole.ADMIN

    user = repo.create(
        username=payload.username,
        email=payload.email,
        full_name=payload.full_name,
        password_hash=hash_password(payload.password),
        role=role,
        status=UserStatus.ACTIVE,
    )
    commit_with_activity(
        db,
        actor_user_id=user.id,
        tenant_id=None,
        action="user.registered",
        resource_type="user",
        resource_id=user.id,
        description=f"{user.username} 注册了账号",
    )
    return user


def authenticate(db: Session, *, username: str, password: str) -> User:
    """校验登录名与口令，成功后刷新最近登录时间，并按当前参数升级旧口令哈希。"""
    user = Repository(db, User).first(User.username == username)
    if user is None or user.status != UserStatus.ACTIVE or not verify_password(password, user.password_hash):
        logger.info("login failed for %s", username)
        raise Unauthenticated("用户名或密码错误。", code="INVALID_CREDENTIALS")

    if needs_rehash(user.password_hash):
        user.password_hash = hash_password(password)
        logger.info("password hash upgraded for user %s", user.id)
    user.last_login_at = utc_now()
    db.commit()
    return user
