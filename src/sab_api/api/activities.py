"""操作日志查询接口。"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from sab_api.core.config import get_settings
from sab_api.db.session import get_db
from sab_api.dependencies import RequestContext, get_request_context
from sab_api.schemas.activity import ActivityData
from sab_api.schemas.common import ERROR_RESPONSES
from sab_api.services import list_activities

router = APIRouter(prefix="/activities", tags=["activities"])


@router.get(
    "",
    summary="查询操作日志",
    description="按时间倒序返回最近的操作日志，limit 超过上限时按上限截断。",
    status_code=status.HTTP_200_OK,
    response_model=list[ActivityData],
    responses={400: ERROR_RESPONSES[400], 401: ERROR_RESPONSES[401]},
)
def get_activities(
    limit: int | None = Query(default=None, ge=1, description="返回条数。"),
    _ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    settings = get_settings()
    effective_limit = min(limit or settings.activity_default_limit, settings.activity_max_limit)
    return [ActivityData.model_validate(item) for item in list_activities(db, limit=effective_limit)]
