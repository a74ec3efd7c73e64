"""租户管理接口。"""

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.orm import Session

from sab_api.db.session import get_db
from sab_api.dependencies import RequestContext, get_request_context, require_admin
from sab_api.schemas.common import ERROR_RESPONSES
from sab_api.schemas.tenant import TenantCreateRequest, TenantData, TenantUpdateRequest
from sab_api.services import tenants as tenant_service

router = APIRouter(prefix="/tenants", tags=["tenants"])


@router.get(
    "",
    summary="查询租户列表",
    status_code=status.HTTP_200_OK,
    response_model=list[TenantData],
    responses={401: ERROR_RESPONSES[401]},
)
def list_tenants(
    _ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    return [TenantData.model_validate(tenant) for tenant in tenant_service.list_tenants(db)]


@router.get(
    "/{tenant_id}",
    summary="查询租户详情",
    status_code=status.HTTP_200_OK,
    response_model=TenantData,
    responses={401: ERROR_RESPONSES[401], 404: ERROR_RESPONSES[404]},
)
def get_tenant(
    tenant_id: int = Path(..., description="租户 ID。"),
    _ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    return TenantData.model_validate(tenant_service.get_tenant(db, tenant_id))


@router.post(
    "",
    summary="创建租户",
    description="名称或域名重复时返回 400。",
    status_code=status.HTTP_201_CREATED,
    response_model=TenantData,
    responses=ERROR_RESPONSES,
)
def create_tenant(
    payload: TenantCreateRequest,
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return TenantData.model_validate(tenant_service.create_tenant(db, ctx, payload))


@router.patch(
    "/{tenant_id}",
    summary="更新租户",
    status_code=status.HTTP_200_OK,
    response_model=TenantData,
    responses=ERROR_RESPONSES,
)
def update_tenant(
    payload: TenantUpdateRequest,
    tenant_id: int = Path(..., description="租户 ID。"),
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return TenantData.model_validate(tenant_service.update_tenant(db, ctx, tenant_id, payload))


@router.delete(
    "/{tenant_id}",
    summary="删除租户",
    description="租户下仍有关联用户时返回 400；订阅不阻止删除。",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=ERROR_RESPONSES,
)
def delete_tenant(
    tenant_id: int = Path(..., description="租户 ID。"),
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    tenant_service.delete_tenant(db, ctx, tenant_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
