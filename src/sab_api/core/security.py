"""访问令牌签发、解析与吊销。

令牌为 HS* 系列签名的 JWT，`sub` 为本地用户 ID。登出时将 jti 拉黑至令牌过期：
配置了 Redis 时写入 Redis，否则写入进程内字典（单实例部署或测试）。
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from threading import Lock
from typing import Any
from uuid import uuid4

import jwt
from jwt import InvalidTokenError
from redis import Redis
from redis.exceptions import RedisError

from sab_api.core.config import get_settings
from sab_api.exceptions import Unauthenticated

logger = logging.getLogger("sab_api.security")

_LOCAL_BLACKLIST: dict[str, int] = {}
_LOCAL_LOCK = Lock()
_redis_client: Redis | None = None


@dataclass
class TokenClaims:
    """解析后的令牌声明。"""

    # 本地用户 ID。
    user_id: int
    # 令牌唯一标识，用于吊销。
    jti: str
    # 过期时间戳（秒）。
    expires_at: int
    # 原始声明集。
    raw: dict[str, Any]


@dataclass
class IssuedToken:
    """签发结果。"""

    access_token: str
    expires_at: datetime
    expires_in: int


def issue_access_token(*, user_id: int, username: str, role: str) -> IssuedToken:
    """签发访问令牌。"""
    settings = get_settings()
    now = datetime.now(timezone.utc)
    expires_at = now + timedelta(seconds=settings.auth_access_token_ttl_seconds)
    claims: dict[str, Any] = {
        "sub": str(user_id),
        "name": username,
        "role": role,
        "iss": settings.auth_jwt_issuer,
        "iat": int(now.timestamp()),
        "exp": int(expires_at.timestamp()),
        "jti": str(uuid4()),
    }
    if settings.auth_jwt_audience:
        claims["aud"] = settings.auth_jwt_audience

    token = jwt.encode(claims, settings.auth_jwt_secret, algorithm=settings.auth_algorithms[0])
    return IssuedToken(
        access_token=token,
        expires_at=expires_at,
        expires_in=settings.auth_access_token_ttl_seconds,
    )


def _decode_jwt(token: str) -> dict[str, Any]:
    """按配置解码并校验令牌。"""
    settings = get_settings()
    try:
        return jwt.decode(
            token,
            key=settings.auth_jwt_secret,
            algorithms=settings.auth_algorithms,
            issuer=settings.auth_jwt_issuer,
            audience=settings.auth_jwt_audience,
            leeway=settings.auth_jwt_leeway_seconds,
            options={"verify_aud": bool(settings.auth_jwt_audience), "require": ["sub", "exp", "jti"]},
        )
    except InvalidTokenError as exc:
        raise Unauthenticated() from exc


def _cleanup_local(now_ts: int) -> None:
    expired_keys = [key for key, expires_at in _LOCAL_BLACKLIST.items() if expires_at <= now_ts]
    for key in expired_keys:
        _LOCAL_BLACKLIST.pop(key, None)


def _get_redis() -> Redis | None:
    global _redis_client
    settings = get_settings()
    if not settings.redis_url:
        return None
    if _redis_client is None:
        _redis_client = Redis.from_url(settings.redis_url, decode_responses=True)
    return _redis_client


def _key_for_jti(jti: str) -> str:
    settings = get_settings()
    return f"{settings.auth_token_blacklist_prefix}{jti}"


def revoke_token_jti(jti: str, exp_ts: int) -> bool:
    """将 token jti 拉黑到令牌过期时间，返回是否写入了共享存储。"""
    now_ts = int(datetime.now(timezone.utc).timestamp())
    ttl = max(1, exp_ts - now_ts)
    redis_client = _get_redis()
    if redis_client is not None:
        try:
            redis_client.setex(_key_for_jti(jti), ttl, "1")
            return True
        except RedisError:
            # Redis 不可用时回退到本地缓存，保证登出语义在当前实例内生效。
            logger.warning("redis unavailable, token %s revoked locally only", jti)

    with _LOCAL_LOCK:
        _cleanup_local(now_ts)
        _LOCAL_BLACKLIST[jti] = exp_ts
    return False


def is_token_jti_revoked(jti: str) -> bool:
    """判断 token jti 是否已被拉黑。"""
    redis_client = _get_redis()
    if redis_client is not None:
        try:
            if redis_client.exists(_key_for_jti(jti)):
                return True
        except RedisError:
            logger.warning("redis unavailable, checking local blacklist only")

    now_ts = int(datetime.now(timezone.utc).timestamp())
    with _LOCAL_LOCK:
        _cleanup_local(now_ts)
        expires_at = _LOCAL_BLACKLIST.get(jti)
        return expires_at is not None and expires_at > now_ts


def _extract_bearer_token(authorization: str | None) -> str:
    """从 Authorization 头中提取 Bearer token，兼容重复头被逗号拼接的场景。"""
    if not authorization:
        raise Unauthenticated()
    tokens = re.findall(r"Bearer\s+([^,\s]+)", authorization, flags=re.IGNORECASE)
    if not tokens:
        raise Unauthenticated()
    return tokens[-1].strip()


def parse_authorization_header(authorization: str | None) -> TokenClaims:
    """解析认证头并返回令牌声明，任何失败都视为未认证。"""
    token = _extract_bearer_token(authorization)
    claims = _decode_jwt(token)

    jti = claims.get("jti")
    if not isinstance(jti, str) or not jti or is_token_jti_revoked(jti):
        raise Unauthenticated()

    try:
        user_id = int(claims["sub"])
    except (TypeError, ValueError) as exc:
        raise Unauthenticated() from exc

    return TokenClaims(user_id=user_id, jti=jti, expires_at=int(claims["exp"]), raw=claims)
