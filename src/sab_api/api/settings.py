"""键值配置接口。"""

from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.orm import Session

from sab_api.db.session import get_db
from sab_api.dependencies import RequestContext, get_request_context, require_admin
from sab_api.schemas.common import ERROR_RESPONSES
from sab_api.schemas.setting import SettingData, SettingUpdateRequest, SettingUpsertRequest
from sab_api.services import settings as setting_service

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get(
    "",
    summary="查询配置列表",
    description="不带 tenantId 时返回全部配置。",
    status_code=status.HTTP_200_OK,
    response_model=list[SettingData],
    responses={401: ERROR_RESPONSES[401]},
)
def list_settings(
    tenant_id: int | None = Query(default=None, alias="tenantId", description="按租户过滤。"),
    _ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    return [SettingData.model_validate(item) for item in setting_service.list_settings(db, tenant_id=tenant_id)]


@router.get(
    "/{setting_id}",
    summary="查询配置详情",
    status_code=status.HTTP_200_OK,
    response_model=SettingData,
    responses={401: ERROR_RESPONSES[401], 404: ERROR_RESPONSES[404]},
)
def get_setting(
    setting_id: int = Path(..., description="配置项 ID。"),
    _ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    return SettingData.model_validate(setting_service.get_setting(db, setting_id))


@router.post(
    "",
    summary="写入配置",
    description="按 (tenantId, key) 写入：新建返回 201，已存在则更新取值并返回 200。",
    status_code=status.HTTP_201_CREATED,
    response_model=SettingData,
    responses={200: {"model": SettingData}, **ERROR_RESPONSES},
)
def upsert_setting(
    payload: SettingUpsertRequest,
    response: Response,
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """写入或更新配置项。"""
    setting, created = setting_service.upsert_setting(db, ctx, payload)
    if not created:
        response.status_code = status.HTTP_200_OK
    return SettingData.model_validate(setting)


@router.patch(
    "/{setting_id}",
    summary="更新配置值",
    status_code=status.HTTP_200_OK,
    response_model=SettingData,
    responses=ERROR_RESPONSES,
)
def update_setting(
    payload: SettingUpdateRequest,
    setting_id: int = Path(..., description="配置项 ID。"),
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return SettingData.model_validate(setting_service.update_setting(db, ctx, setting_id, payload))


@router.delete(
    "/{setting_id}",
    summary="删除配置",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=ERROR_RESPONSES,
)
def delete_setting(
    setting_id: int = Path(..., description="配置项 ID。"),
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    setting_service.delete_setting(db, ctx, setting_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
