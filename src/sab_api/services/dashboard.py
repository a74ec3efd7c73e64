"""仪表盘统计。"""

from sqlalchemy.orm import Session

from sab_api.models.billing import Plan
from sab_api.models.enums import TenantStatus, UserStatus
from sab_api.models.tenant import Tenant, User
from sab_api.services.repository import Repository


def compute_stats(db: Session) -> dict[str, int]:
    """每次调用实时计数，活跃数仅统计状态恰为 active 的记录。"""
    users = Repository(db, User)
    tenants = Repository(db, Tenant)
    return {
        "total_users": users.count(),
        "active_users": users.count(User.status == UserStatus.ACTIVE),
        "total_tenants": tenants.count(),
        "active_tenants": tenants.count(Tenant.status == TenantStatus.ACTIVE),
        "total_plans": Repository(db, Plan).count(),
    }
