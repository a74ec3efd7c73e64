"""全局通用结构。

对外字段统一使用 camelCase，请求体同时接受 snake_case 字段名。
"""

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sab_api.exceptions import ValidationFailed, field_error


class BaseSchema(BaseModel):
    """响应基础结构，开启对象映射能力。"""

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


class RequestSchema(BaseModel):
    """请求基础结构：字段白名单，未知字段直接拒绝。"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class PatchSchema(RequestSchema):
    """局部更新请求基类，未出现的字段保持原值。"""

    # 允许显式置空的字段。
    nullable_fields: ClassVar[frozenset[str]] = frozenset()

    def changes(self) -> dict[str, Any]:
        """返回调用方显式提供的顶层字段（嵌套对象完整输出）；对不可空字段传 null 视为校验失败。"""
        values = self.model_dump(include=self.model_fields_set)
        errors = [
            field_error(to_camel(name), "该字段不允许为 null。", "null_not_allowed")
            for name, value in values.items()
            if value is None and name not in self.nullable_fields
        ]
        if errors:
            raise ValidationFailed(errors=errors)
        return values


class ErrorResponse(BaseSchema):
    """统一错误响应。"""

    request_id: str | None = Field(default=None, description="服务端生成的请求追踪 ID。")
    code: str = Field(description="机器可识别错误码。")
    message: str = Field(description="人类可读错误信息。")
    details: dict[str, Any] = Field(default_factory=dict, description="错误上下文。")
    error: list[dict[str, Any]] | None = Field(default=None, description="字段级校验错误，仅校验失败时出现。")


class HealthStatusData(BaseSchema):
    """健康检查返回结构。"""

    status: str = Field(description="健康状态值，常见为 ok 或 ready。")


ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}
