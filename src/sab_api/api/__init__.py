"""路由模块导出集合。"""

from . import activities, auth, dashboard, health, permissions, plans, roles, settings, subscriptions, tenants, users

__all__ = [
    "activities",
    "auth",
    "dashboard",
    "health",
    "permissions",
    "plans",
    "roles",
    "settings",
    "subscriptions",
    "tenants",
    "users",
]
