"""注册、登录与登出结构。"""

from datetime import datetime

from pydantic import Field

from sab_api.schemas.common import BaseSchema, RequestSchema
from sab_api.schemas.user import EMAIL_PATTERN, USERNAME_PATTERN, UserData


class AuthRegisterRequest(RequestSchema):
    """本地账号注册请求。"""

    username: str = Field(min_length=3, max_length=64, pattern=USERNAME_PATTERN, examples=["alice"])
    email: str = Field(max_length=256, pattern=EMAIL_PATTERN, examples=["alice@example.com"])
    password: str = Field(min_length=6, max_length=128, examples=["StrongPassw0rd!"])
    full_name: str | None = Field(default=None, max_length=128)


class AuthLoginRequest(RequestSchema):
    """本地账号登录请求。"""

    username: str = Field(min_length=1, max_length=64, examples=["alice"])
    password: str = Field(min_length=1, max_length=128)


class AuthLoginData(BaseSchema):
    """登录结果结构。"""

    access_token: str = Field(description="访问令牌。")
    token_type: str = Field(default="bearer", description="令牌类型。")
    expires_at: datetime = Field(description="令牌过期时间（UTC）。")
    expires_in: int = Field(description="距过期剩余秒数。")
    user: UserData = Field(description="当前登录用户。")


class AuthLogoutData(BaseSchema):
    """登出结果结构。"""

    logged_out: bool = Field(description="是否已完成登出。")
    revoked: bool = Field(description="吊销是否写入共享存储（Redis）。")
