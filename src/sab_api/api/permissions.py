"""运行时权限查询接口（给前端做界面控制，无副作用）。"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from sab_api.db.session import get_db
from sab_api.dependencies import RequestContext, get_request_context
from sab_api.schemas.common import ERROR_RESPONSES
from sab_api.schemas.role import PermissionCatalogData, PermissionSnapshotData
from sab_api.services import effective_permissions, is_admin, permission_catalog

router = APIRouter(prefix="/permissions", tags=["permissions"])


@router.get(
    "/catalog",
    summary="查询权限目录",
    description="返回可配置的资源与操作列表。",
    status_code=status.HTTP_200_OK,
    response_model=PermissionCatalogData,
    responses={401: ERROR_RESPONSES[401]},
)
def get_catalog(_ctx: RequestContext = Depends(get_request_context)):
    return PermissionCatalogData(**permission_catalog())


@router.get(
    "/me",
    summary="查询当前权限快照",
    description="返回当前用户角色的有效权限矩阵；角色未配置时回退到内置默认矩阵。",
    status_code=status.HTTP_200_OK,
    response_model=PermissionSnapshotData,
    responses={401: ERROR_RESPONSES[401]},
)
def my_permissions(
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """接口鉴权仍以角色名为准，该矩阵仅用于界面控制。"""
    source, entries = effective_permissions(db, ctx.role)
    return PermissionSnapshotData(role=ctx.role, source=source, is_admin=is_admin(ctx), permissions=entries)
