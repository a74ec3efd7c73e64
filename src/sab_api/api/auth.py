"""认证接口。"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from sab_api.core.security import issue_access_token, revoke_token_jti
from sab_api.db.session import get_db
from sab_api.dependencies import RequestContext, get_current_user, get_request_context
from sab_api.models.tenant import User
from sab_api.schemas.auth import AuthLoginData, AuthLoginRequest, AuthLogoutData, AuthRegisterRequest
from sab_api.schemas.common import ERROR_RESPONSES
from sab_api.schemas.user import UserData
from sab_api.services import users as user_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    summary="注册本地账号",
    description="创建本地账号（登录名+邮箱+密码）；系统首个账号默认授予管理员角色。",
    status_code=status.HTTP_201_CREATED,
    response_model=UserData,
    responses={400: ERROR_RESPONSES[400]},
)
def register(payload: AuthRegisterRequest, db: Session = Depends(get_db)):
    """注册本地账号。"""
    return UserData.model_validate(user_service.register_user(db, payload))


@router.post(
    "/login",
    summary="本地账号登录",
    description="使用登录名与密码登录，返回 Bearer 访问令牌。",
    status_code=status.HTTP_200_OK,
    response_model=AuthLoginData,
    responses={400: ERROR_RESPONSES[400], 401: ERROR_RESPONSES[401]},
)
def login(payload: AuthLoginRequest, db: Session = Depends(get_db)):
    """本地账号登录并签发访问令牌。"""
    user = user_service.authenticate(db, username=payload.username, password=payload.password)
    issued = issue_access_token(user_id=user.id, username=user.username, role=user.role)
    return AuthLoginData(
        access_token=issued.access_token,
        token_type="bearer",
        expires_at=issued.expires_at,
        expires_in=issued.expires_in,
        user=UserData.model_validate(user),
    )


@router.post(
    "/logout",
    summary="登出",
    description="将当前访问令牌加入黑名单（优先 Redis），已登出的令牌立即失效。",
    status_code=status.HTTP_200_OK,
    response_model=AuthLogoutData,
    responses={401: ERROR_RESPONSES[401]},
)
def logout(ctx: RequestContext = Depends(get_request_context)):
    """登出并拉黑当前访问令牌。"""
    shared = revoke_token_jti(ctx.claims.jti, ctx.claims.expires_at)
    return AuthLogoutData(logged_out=True, revoked=shared)


@router.get(
    "/me",
    summary="获取当前身份",
    status_code=status.HTTP_200_OK,
    response_model=UserData,
    responses={401: ERROR_RESPONSES[401]},
)
def me(user: User = Depends(get_current_user)):
    return UserData.model_validate(user)
