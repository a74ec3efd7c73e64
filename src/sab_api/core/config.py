"""应用运行配置。"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """接口服务共享配置。"""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="SAB_", extra="ignore")

    app_name: str = Field(default="SaaS Admin Boilerplate", description="应用名称。")
    app_env: str = Field(default="dev", description="运行环境标识。")
    app_debug: bool = Field(default=False, description="是否开启调试模式。")
    api_prefix: str = Field(default="/api", description="统一接口前缀。")
    log_level: str = Field(default="INFO", description="日志级别。")
    database_url: str = Field(
        default="sqlite+pysqlite:///./data.db",
        description="数据库连接地址，生产环境建议使用 postgresql+psycopg。",
    )
    db_auto_create: bool = Field(default=True, description="启动时是否自动建表。")

    auth_jwt_algorithms: str = Field(default="HS256", description="令牌签名算法列表，逗号分隔。")
    auth_jwt_issuer: str = Field(default="sab-api", description="签发方，同时用于校验。")
    auth_jwt_audience: str | None = Field(default=None, description="期望的受众。")
    auth_jwt_secret: str = Field(default="change-me-in-prod", description="令牌签名对称密钥。")
    auth_jwt_leeway_seconds: int = Field(default=30, description="令牌校验时钟容错秒数。")
    auth_access_token_ttl_seconds: int = Field(default=7200, description="访问令牌有效期（秒）。")
    auth_password_hash_iterations: int = Field(default=390000, description="PBKDF2 密码哈希迭代次数。")
    auth_first_user_admin: bool = Field(default=True, description="系统内首个注册账号是否自动授予 admin 角色。")
    redis_url: str | None = Field(default=None, description="Redis 连接地址，用于令牌黑名单。")
    auth_token_blacklist_prefix: str = Field(default="auth:blacklist:", description="令牌黑名单键前缀。")

    activity_policy: Literal["strict", "best_effort"] = Field(
        default="strict",
        description="操作日志写入策略：strict 与业务变更同事务；best_effort 在业务提交后尽力写入。",
    )
    activity_default_limit: int = Field(default=50, ge=1, description="操作日志默认返回条数。")
    activity_max_limit: int = Field(default=500, ge=1, description="操作日志单次最大返回条数。")

    @field_validator("auth_jwt_algorithms")
    @classmethod
    def normalize_algorithms(cls, value: str) -> str:
        """规范化算法列表并确保至少配置一项。"""
        items = [item.strip() for item in value.split(",") if item.strip()]
        if not items:
            raise ValueError("auth_jwt_algorithms must include at least one algorithm")
        return ",".join(items)

    @property
    def auth_algorithms(self) -> list[str]:
        """返回规范化后的算法数组。"""
        return [item.strip() for item in self.auth_jwt_algorithms.split(",") if item.strip()]


@lru_cache
def get_settings() -> Settings:
    """返回缓存后的配置单例。"""
    return Settings()
