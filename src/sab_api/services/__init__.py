"""服务层能力导出集合。

资源服务（users/tenants/plans/...）依赖请求上下文，按模块直接导入。
"""

from sab_api.services.activity import commit_with_activity, diff_changes, list_activities, record_activity
from sab_api.services.authorization import (
    ensure_admin,
    ensure_user_delete_allowed,
    ensure_user_update_allowed,
    is_admin,
    strip_admin_only_fields,
)
from sab_api.services.local_auth import hash_password, needs_rehash, verify_password
from sab_api.services.permissions import effective_permissions, permission_catalog
from sab_api.services.repository import Repository

__all__ = [
    "Repository",
    "record_activity",
    "commit_with_activity",
    "diff_changes",
    "list_activities",
    "is_admin",
    "ensure_admin",
    "ensure_user_update_allowed",
    "ensure_user_delete_allowed",
    "strip_admin_only_fields",
    "hash_password",
    "verify_password",
    "needs_rehash",
    "permission_catalog",
    "effective_permissions",
]
