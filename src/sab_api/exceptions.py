"""业务异常定义与应用异常处理注册。

业务层统一抛出 `ApiError` 子类，由同一条 HTTPException 处理链渲染为标准错误结构：
`{requestId, code, message, details[, error]}`，其中 `error` 仅在字段校验失败时出现。
"""

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from sab_api.utils.response import DEFAULT_ERROR_MESSAGE, error_payload

logger = logging.getLogger("sab_api.errors")


class ApiError(HTTPException):
    """可被统一渲染的业务异常基类。"""

    http_status = status.HTTP_400_BAD_REQUEST
    code = "BAD_REQUEST"
    default_message = "请求参数不合法。"

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        details: dict[str, Any] | None = None,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        detail: dict[str, Any] = {"code": code or self.code, "message": message or self.default_message}
        if details:
            detail["details"] = details
        if errors is not None:
            detail["errors"] = errors
        super().__init__(status_code=self.http_status, detail=detail)


class Unauthenticated(ApiError):
    """未登录或会话失效。"""

    http_status = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"
    default_message = "未登录或登录状态已失效。"


class Forbidden(ApiError):
    """已登录但角色不足，或越权操作他人资源。"""

    http_status = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"
    default_message = "无权限访问该资源。"


class NotFoundError(ApiError):
    http_status = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    default_message = "请求资源不存在。"


class ValidationFailed(ApiError):
    """字段结构、枚举取值或业务前置条件不满足。"""

    code = "VALIDATION_ERROR"
    default_message = "请求参数校验失败。"


class ConflictError(ApiError):
    """唯一性或引用完整性冲突。"""

    code = "CONFLICT"
    default_message = "请求与当前数据状态冲突。"


class ReferenceNotFound(ApiError):
    """请求体引用的关联实体不存在。"""

    code = "REFERENCE_NOT_FOUND"
    default_message = "引用的关联资源不存在。"


def field_error(field: str, message: str, error_type: str = "value_error") -> dict[str, str]:
    """构造单个字段错误项。"""
    return {"field": field, "message": message, "type": error_type}


def _default_http_error_code(status_code: int) -> str:
    if status_code == status.HTTP_400_BAD_REQUEST:
        return "BAD_REQUEST"
    if status_code == status.HTTP_401_UNAUTHORIZED:
        return "UNAUTHORIZED"
    if status_code == status.HTTP_403_FORBIDDEN:
        return "FORBIDDEN"
    if status_code == status.HTTP_404_NOT_FOUND:
        return "NOT_FOUND"
    if status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return "METHOD_NOT_ALLOWED"
    return "HTTP_ERROR"


def _default_http_message(status_code: int) -> str:
    if status_code == status.HTTP_400_BAD_REQUEST:
        return "请求参数不合法。"
    if status_code == status.HTTP_401_UNAUTHORIZED:
        return "未登录或登录状态已失效。"
    if status_code == status.HTTP_403_FORBIDDEN:
        return "无权限访问该资源。"
    if status_code == status.HTTP_404_NOT_FOUND:
        return "请求资源不存在。"
    if status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return "请求方法不被支持。"
    return "请求处理失败。"


def _parse_http_detail(
    detail: object, status_code: int
) -> tuple[str, str, dict[str, Any], list[dict[str, Any]] | None]:
    code = _default_http_error_code(status_code)
    message = _default_http_message(status_code)
    details: dict[str, Any] = {"statusCode": status_code, "reason": code.lower()}
    errors = None

    if isinstance(detail, dict):
        code = str(detail.get("code") or code)
        message = str(detail.get("message") or message)
        details["reason"] = code.lower()
        raw_details = detail.get("details")
        if isinstance(raw_details, dict):
            details.update(raw_details)
        raw_errors = detail.get("errors")
        if isinstance(raw_errors, list):
            errors = raw_errors
        return code, message, details, errors

    if isinstance(detail, str) and detail.strip():
        return code, detail, details, errors

    return code, message, details, errors


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """将业务异常与协议异常统一包装为标准错误结构。"""
    code, message, details, errors = _parse_http_detail(exc.detail, exc.status_code)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_payload(request, code=code, message=message, details=details, errors=errors),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """请求体/查询参数校验失败统一按 400 返回并列出字段。"""
    normalized_errors = [
        field_error(
            ".".join(str(item) for item in err.get("loc", []) if item not in {"body", "query", "path"}),
            str(err.get("msg")),
            str(err.get("type")),
        )
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_payload(
            request,
            code="VALIDATION_ERROR",
            message="请求参数校验失败。",
            details={"statusCode": status.HTTP_400_BAD_REQUEST, "reason": "validation_error"},
            errors=normalized_errors,
        ),
    )


async def integrity_error_handler(request: Request, exc: IntegrityError):
    """数据库约束兜底：唯一键或外键限制被触发时按冲突返回。"""
    logger.warning("integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_payload(
            request,
            code="CONFLICT",
            message=ConflictError.default_message,
            details={"statusCode": status.HTTP_400_BAD_REQUEST, "reason": "integrity_error"},
        ),
    )


async def unexpected_exception_handler(request: Request, exc: Exception):
    """处理未捕获异常，避免内部细节泄露。"""
    logger.exception("unexpected error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_payload(
            request,
            code="INTERNAL_ERROR",
            message=DEFAULT_ERROR_MESSAGE,
            details={"statusCode": status.HTTP_500_INTERNAL_SERVER_ERROR, "reason": "unexpected_exception"},
        ),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """集中注册异常处理器。"""
    app.exception_handler(StarletteHTTPException)(http_exception_handler)
    app.exception_handler(RequestValidationError)(validation_exception_handler)
    app.exception_handler(IntegrityError)(integrity_error_handler)
    app.exception_handler(Exception)(unexpected_exception_handler)
