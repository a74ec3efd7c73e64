"""顶层路由注册。"""

from fastapi import APIRouter

from . import activities, auth, dashboard, health, permissions, plans, roles, settings, subscriptions, tenants, users

api_router = APIRouter()

# 固定注册顺序，便于在线接口文档展示和问题定位。
api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(tenants.router)
api_router.include_router(plans.router)
api_router.include_router(subscriptions.router)
api_router.include_router(settings.router)
api_router.include_router(activities.router)
api_router.include_router(dashboard.router)
api_router.include_router(roles.router)
api_router.include_router(permissions.router)
