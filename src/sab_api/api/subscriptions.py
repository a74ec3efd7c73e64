"""订阅管理接口。"""

from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.orm import Session

from sab_api.db.session import get_db
from sab_api.dependencies import RequestContext, get_request_context, require_admin
from sab_api.schemas.billing import SubscriptionCreateRequest, SubscriptionData, SubscriptionUpdateRequest
from sab_api.schemas.common import ERROR_RESPONSES
from sab_api.services import subscriptions as subscription_service

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


@router.get(
    "",
    summary="查询订阅列表",
    status_code=status.HTTP_200_OK,
    response_model=list[SubscriptionData],
    responses={401: ERROR_RESPONSES[401]},
)
def list_subscriptions(
    tenant_id: int | None = Query(default=None, alias="tenantId", description="按租户过滤。"),
    _ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    subscriptions = subscription_service.list_subscriptions(db, tenant_id=tenant_id)
    return [SubscriptionData.model_validate(item) for item in subscriptions]


@router.get(
    "/{subscription_id}",
    summary="查询订阅详情",
    status_code=status.HTTP_200_OK,
    response_model=SubscriptionData,
    responses={401: ERROR_RESPONSES[401], 404: ERROR_RESPONSES[404]},
)
def get_subscription(
    subscription_id: int = Path(..., description="订阅 ID。"),
    _ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    return SubscriptionData.model_validate(subscription_service.get_subscription(db, subscription_id))


@router.post(
    "",
    summary="创建订阅",
    description="租户或套餐不存在时返回 400。",
    status_code=status.HTTP_201_CREATED,
    response_model=SubscriptionData,
    responses=ERROR_RESPONSES,
)
def create_subscription(
    payload: SubscriptionCreateRequest,
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return SubscriptionData.model_validate(subscription_service.create_subscription(db, ctx, payload))


@router.patch(
    "/{subscription_id}",
    summary="更新订阅",
    description="状态流转不做限制；改为 canceled 且未提供 endDate 时写入当前时间。",
    status_code=status.HTTP_200_OK,
    response_model=SubscriptionData,
    responses=ERROR_RESPONSES,
)
def update_subscription(
    payload: SubscriptionUpdateRequest,
    subscription_id: int = Path(..., description="订阅 ID。"),
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    subscription = subscription_service.update_subscription(db, ctx, subscription_id, payload)
    return SubscriptionData.model_validate(subscription)


@router.delete(
    "/{subscription_id}",
    summary="删除订阅",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=ERROR_RESPONSES,
)
def delete_subscription(
    subscription_id: int = Path(..., description="订阅 ID。"),
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    subscription_service.delete_subscription(db, ctx, subscription_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
