"""ORM 模型导出集合。"""

from sab_api.models.activity import Activity
from sab_api.models.billing import Plan, Subscription
from sab_api.models.permission import Role
from sab_api.models.setting import Setting
from sab_api.models.tenant import Tenant, User

__all__ = [
    "Activity",
    "Plan",
    "Role",
    "Setting",
    "Subscription",
    "Tenant",
    "User",
]
