"""仪表盘接口。"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from sab_api.db.session import get_db
from sab_api.dependencies import RequestContext, get_request_context
from sab_api.schemas.activity import DashboardStatsData
from sab_api.schemas.common import ERROR_RESPONSES
from sab_api.services.dashboard import compute_stats

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get(
    "/stats",
    summary="查询汇总统计",
    description="实时统计用户、租户与套餐数量。",
    status_code=status.HTTP_200_OK,
    response_model=DashboardStatsData,
    responses={401: ERROR_RESPONSES[401]},
)
def get_stats(
    _ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    return DashboardStatsData(**compute_stats(db))
