"""用户管理接口。"""

from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.orm import Session

from sab_api.db.session import get_db
from sab_api.dependencies import RequestContext, get_request_context, require_admin
from sab_api.schemas.common import ERROR_RESPONSES
from sab_api.schemas.user import UserCreateRequest, UserData, UserUpdateRequest
from sab_api.services import users as user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get(
    "",
    summary="查询用户列表",
    description="返回全部用户，可按所属租户过滤；响应不含口令字段。",
    status_code=status.HTTP_200_OK,
    response_model=list[UserData],
    responses={401: ERROR_RESPONSES[401]},
)
def list_users(
    tenant_id: int | None = Query(default=None, alias="tenantId", description="按所属租户过滤。"),
    _ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """查询用户列表。"""
    return [UserData.model_validate(user) for user in user_service.list_users(db, tenant_id=tenant_id)]


@router.get(
    "/{user_id}",
    summary="查询用户详情",
    status_code=status.HTTP_200_OK,
    response_model=UserData,
    responses={401: ERROR_RESPONSES[401], 404: ERROR_RESPONSES[404]},
)
def get_user(
    user_id: int = Path(..., description="目标用户 ID。"),
    _ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    return UserData.model_validate(user_service.get_user(db, user_id))


@router.post(
    "",
    summary="创建用户",
    description="管理员创建用户；登录名或邮箱重复返回 400，所属租户不存在返回 400。",
    status_code=status.HTTP_201_CREATED,
    response_model=UserData,
    responses=ERROR_RESPONSES,
)
def create_user(
    payload: UserCreateRequest,
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """创建用户并记录操作日志。"""
    return UserData.model_validate(user_service.create_user(db, ctx, payload))


@router.patch(
    "/{user_id}",
    summary="更新用户",
    description=(
        "管理员可更新任意用户；普通用户只能更新本人，"
        "其提交的 role/status/tenantId 字段会被忽略。"
    ),
    status_code=status.HTTP_200_OK,
    response_model=UserData,
    responses=ERROR_RESPONSES,
)
def update_user(
    payload: UserUpdateRequest,
    user_id: int = Path(..., description="目标用户 ID。"),
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """局部更新用户资料。"""
    return UserData.model_validate(user_service.update_user(db, ctx, user_id, payload))


@router.delete(
    "/{user_id}",
    summary="删除用户",
    description="仅限管理员，且不能删除当前登录账号。",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=ERROR_RESPONSES,
)
def delete_user(
    user_id: int = Path(..., description="目标用户 ID。"),
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """删除用户。非管理员无论目标为谁均返回 403。"""
    user_service.delete_user(db, ctx, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
