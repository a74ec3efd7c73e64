"""接口鉴权规则。

鉴权以用户角色名字面值为准：仅 `admin` 可执行写操作；非管理员只允许读接口及修改本人资料。
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sab_api.exceptions import Forbidden, ValidationFailed, field_error
from sab_api.models.enums import UserRole

if TYPE_CHECKING:
    from sab_api.dependencies import RequestContext

# 非管理员修改本人资料时会被剔除的字段。
ADMIN_ONLY_USER_FIELDS = frozenset({"role", "status", "tenant_id"})


def is_admin(ctx: RequestContext) -> bool:
    return ctx.role == UserRole.ADMIN


def ensure_admin(ctx: RequestContext) -> None:
    """要求当前主体为管理员。"""
    if not is_admin(ctx):
        raise Forbidden("需要管理员权限。")


def ensure_user_update_allowed(ctx: RequestContext, target_user_id: int) -> None:
    """管理员可修改任意用户，非管理员仅可修改本人。"""
    if is_admin(ctx):
        return
    if target_user_id != ctx.user_id:
        raise Forbidden("只能修改本人资料。")


def strip_admin_only_fields(ctx: RequestContext, changes: dict[str, Any]) -> dict[str, Any]:
    """非管理员提交的角色/状态/租户变更静默忽略。"""
    if is_admin(ctx):
        return changes
    return {name: value for name, value in changes.items() if name not in ADMIN_ONLY_USER_FIELDS}


def ensure_user_delete_allowed(ctx: RequestContext, target_user_id: int) -> None:
    """删除用户需要管理员权限，且不允许删除本人。"""
    ensure_admin(ctx)
    if target_user_id == ctx.user_id:
        raise ValidationFailed(
            "不能删除当前登录账号。",
            code="SELF_DELETE_FORBIDDEN",
            errors=[field_error("id", "目标用户不能是当前登录账号。", "self_delete")],
        )
