"""统一错误响应结构工具。"""

from datetime import datetime, timezone
from typing import Any

from fastapi import Request

DEFAULT_ERROR_MESSAGE = "internal server error"


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def error_payload(
    request: Request,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
    errors: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """构造统一错误响应结构。"""
    final_details: dict[str, Any] = {
        "method": request.method.upper(),
        "path": request.url.path,
        "timestamp": _utc_now_iso(),
    }
    if details:
        final_details.update(details)
    payload: dict[str, Any] = {
        "requestId": getattr(request.state, "request_id", None),
        "code": code,
        "message": message,
        "details": final_details,
    }
    if errors is not None:
        payload["error"] = errors
    return payload
