"""角色权限矩阵维护接口。"""

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.orm import Session

from sab_api.db.session import get_db
from sab_api.dependencies import RequestContext, get_request_context, require_admin
from sab_api.schemas.common import ERROR_RESPONSES
from sab_api.schemas.role import RoleCreateRequest, RoleData, RoleUpdateRequest
from sab_api.services import roles as role_service

router = APIRouter(prefix="/roles", tags=["roles"])


@router.get(
    "",
    summary="查询已配置角色",
    description="仅返回已写入数据库的角色矩阵；未配置的角色使用内置默认值。",
    status_code=status.HTTP_200_OK,
    response_model=list[RoleData],
    responses={401: ERROR_RESPONSES[401]},
)
def list_roles(
    _ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    return [RoleData.model_validate(role) for role in role_service.list_roles(db)]


@router.get(
    "/{role_id}",
    summary="查询角色详情",
    status_code=status.HTTP_200_OK,
    response_model=RoleData,
    responses={401: ERROR_RESPONSES[401], 404: ERROR_RESPONSES[404]},
)
def get_role(
    role_id: int = Path(..., description="角色 ID。"),
    _ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    return RoleData.model_validate(role_service.get_role(db, role_id))


@router.post(
    "",
    summary="配置角色权限",
    description="为内置角色（admin/editor/user）写入资源级 CRUD 矩阵，每个角色仅一份。",
    status_code=status.HTTP_201_CREATED,
    response_model=RoleData,
    responses=ERROR_RESPONSES,
)
def create_role(
    payload: RoleCreateRequest,
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return RoleData.model_validate(role_service.create_role(db, ctx, payload))


@router.patch(
    "/{role_id}",
    summary="更新角色权限",
    status_code=status.HTTP_200_OK,
    response_model=RoleData,
    responses=ERROR_RESPONSES,
)
def update_role(
    payload: RoleUpdateRequest,
    role_id: int = Path(..., description="角色 ID。"),
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return RoleData.model_validate(role_service.update_role(db, ctx, role_id, payload))


@router.delete(
    "/{role_id}",
    summary="删除角色权限配置",
    description="删除后该角色回退到内置默认矩阵。",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=ERROR_RESPONSES,
)
def delete_role(
    role_id: int = Path(..., description="角色 ID。"),
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    role_service.delete_role(db, ctx, role_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
