"""套餐管理接口。"""

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.orm import Session

from sab_api.db.session import get_db
from sab_api.dependencies import RequestContext, get_request_context, require_admin
from sab_api.schemas.billing import PlanCreateRequest, PlanData, PlanUpdateRequest
from sab_api.schemas.common import ERROR_RESPONSES
from sab_api.services import plans as plan_service

router = APIRouter(prefix="/plans", tags=["plans"])


@router.get(
    "",
    summary="查询套餐列表",
    status_code=status.HTTP_200_OK,
    response_model=list[PlanData],
    responses={401: ERROR_RESPONSES[401]},
)
def list_plans(
    _ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    return [PlanData.model_validate(plan) for plan in plan_service.list_plans(db)]


@router.get(
    "/{plan_id}",
    summary="查询套餐详情",
    status_code=status.HTTP_200_OK,
    response_model=PlanData,
    responses={401: ERROR_RESPONSES[401], 404: ERROR_RESPONSES[404]},
)
def get_plan(
    plan_id: int = Path(..., description="套餐 ID。"),
    _ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    return PlanData.model_validate(plan_service.get_plan(db, plan_id))


@router.post(
    "",
    summary="创建套餐",
    description="价格以最小货币单位（如分）表示；名称重复时返回 400。",
    status_code=status.HTTP_201_CREATED,
    response_model=PlanData,
    responses=ERROR_RESPONSES,
)
def create_plan(
    payload: PlanCreateRequest,
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return PlanData.model_validate(plan_service.create_plan(db, ctx, payload))


@router.patch(
    "/{plan_id}",
    summary="更新套餐",
    status_code=status.HTTP_200_OK,
    response_model=PlanData,
    responses=ERROR_RESPONSES,
)
def update_plan(
    payload: PlanUpdateRequest,
    plan_id: int = Path(..., description="套餐 ID。"),
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return PlanData.model_validate(plan_service.update_plan(db, ctx, plan_id, payload))


@router.delete(
    "/{plan_id}",
    summary="删除套餐",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=ERROR_RESPONSES,
)
def delete_plan(
    plan_id: int = Path(..., description="套餐 ID。"),
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    plan_service.delete_plan(db, ctx, plan_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
