"""FastAPI 应用入口点。"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from sab_api.api.router import api_router
from sab_api.core.config import get_settings
from sab_api.core.log import logger, setup_logging
from sab_api.db.base import create_schema
from sab_api.db.session import engine
from sab_api.exceptions import register_exception_handlers
from sab_api.middlewares import register_middlewares

settings = get_settings()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """启动时初始化日志，并按配置建表。"""
    setup_logging()
    current = get_settings()
    if current.db_auto_create:
        create_schema(engine)
    logger.info("%s started (env=%s, activity_policy=%s)", current.app_name, current.app_env, current.activity_policy)
    yield


def create_app() -> FastAPI:
    """创建并配置 FastAPI 应用实例。"""
    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        debug=settings.app_debug,
        lifespan=lifespan,
        description=(
            "多租户 SaaS 管理后台接口。\n\n"
            "字段统一使用 camelCase；错误统一返回：`{requestId, code, message, details}`。\n"
            "通过 Bearer 访问令牌进行认证，写操作仅限管理员。"
        ),
        openapi_tags=[
            {"name": "health", "description": "服务存活与就绪探针。"},
            {"name": "auth", "description": "注册、登录、登出与当前身份。"},
            {"name": "users", "description": "用户查询与管理。"},
            {"name": "tenants", "description": "租户生命周期管理。"},
            {"name": "plans", "description": "套餐管理。"},
            {"name": "subscriptions", "description": "租户订阅管理。"},
            {"name": "settings", "description": "全局与租户级键值配置。"},
            {"name": "activities", "description": "操作日志查询。"},
            {"name": "dashboard", "description": "汇总统计。"},
            {"name": "roles", "description": "角色权限矩阵维护。"},
            {"name": "permissions", "description": "运行时权限查询（给前端做界面控制，无副作用）。"},
        ],
    )

    register_middlewares(app)
    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.api_prefix)
    return app


app = create_app()
