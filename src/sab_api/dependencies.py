"""请求上下文依赖。

职责:
1. 解析并校验访问令牌（签名、过期、吊销）。
2. 将令牌主体映射为本地 User，并拒绝已删除或停用的账号。
3. 生成后续路由统一使用的 RequestContext。
"""

from dataclasses import dataclass

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from sab_api.core.security import TokenClaims, parse_authorization_header
from sab_api.db.session import get_db
from sab_api.exceptions import Unauthenticated
from sab_api.models.enums import UserStatus
from sab_api.models.tenant import User
from sab_api.services.authorization import ensure_admin

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class RequestContext:
    """请求上下文。

    该对象在路由层作为统一输入，避免每个接口重复解析令牌与用户。
    """

    # 当前请求用户 ID。
    user_id: int
    # 当前用户登录名，用于操作日志描述。
    username: str
    # 当前用户角色字面值，鉴权以此为准。
    role: str
    # 当前用户所属租户 ID。
    tenant_id: int | None
    # 令牌声明。
    claims: TokenClaims


def get_token_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> TokenClaims:
    """提取并解析当前请求的访问令牌。"""
    authorization = None
    if credentials is not None and credentials.credentials:
        authorization = f"{credentials.scheme} {credentials.credentials}"
    return parse_authorization_header(authorization)


def get_current_user(
    claims: TokenClaims = Depends(get_token_claims),
    db: Session = Depends(get_db),
) -> User:
    """返回令牌对应的本地用户。"""
    user = db.get(User, claims.user_id)
    if user is None or user.status == UserStatus.INACTIVE:
        raise Unauthenticated()
    return user


def get_request_context(
    claims: TokenClaims = Depends(get_token_claims),
    user: User = Depends(get_current_user),
) -> RequestContext:
    """要求已登录，并构造请求上下文。"""
    return RequestContext(
        user_id=user.id,
        username=user.username,
        role=user.role,
        tenant_id=user.tenant_id,
        claims=claims,
    )


def require_admin(ctx: RequestContext = Depends(get_request_context)) -> RequestContext:
    """按角色做路由级权限限制，仅管理员放行。"""
    ensure_admin(ctx)
    return ctx
