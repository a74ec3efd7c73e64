"""领域枚举定义。"""

from enum import StrEnum


class UserRole(StrEnum):
    """用户角色，鉴权以角色名字面值为准。"""

    ADMIN = "admin"  # 平台管理员，可执行全部写操作。
    EDITOR = "editor"  # 编辑者，按非管理员处理，仅可读及维护本人资料。
    USER = "user"  # 普通用户。


class UserStatus(StrEnum):
    """用户状态。"""

    ACTIVE = "active"  # 正常可登录。
    INACTIVE = "inactive"  # 已停用，禁止登录及使用已签发令牌。
    PENDING = "pending"  # 邀请/待激活。


class TenantStatus(StrEnum):
    """租户状态。"""

    ACTIVE = "active"
    INACTIVE = "inactive"
    TRIAL = "trial"  # 试用期。


class PlanInterval(StrEnum):
    """套餐计费周期。"""

    MONTH = "month"
    YEAR = "year"


class PlanStatus(StrEnum):
    """套餐上架状态。"""

    ACTIVE = "active"
    INACTIVE = "inactive"


class SubscriptionStatus(StrEnum):
    """订阅状态。

    约定流转：pending -> active -> {canceled, past_due}；past_due -> {active, canceled}；
    canceled 为终态。当前不强制校验流转，允许写入任一合法取值。
    """

    PENDING = "pending"
    ACTIVE = "active"
    PAST_DUE = "past_due"
    CANCELED = "canceled"


class PermissionResource(StrEnum):
    """权限矩阵可配置的资源。"""

    USERS = "users"
    TENANTS = "tenants"
    PLANS = "plans"
    SUBSCRIPTIONS = "subscriptions"
    SETTINGS = "settings"
    ROLES = "roles"
    ACTIVITIES = "activities"
