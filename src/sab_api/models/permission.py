"""角色权限矩阵模型。"""

from typing import Any

from sqlalchemy import JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sab_api.models.base import Base, IntegerPrimaryKeyMixin, TimestampMixin


class Role(Base, IntegerPrimaryKeyMixin, TimestampMixin):
    """内置角色的资源级 CRUD 权限配置。

    说明：
    1. name 取值限定为内置角色名（admin/editor/user），同名唯一。
    2. permissions 为按资源排序的 {resource, create, read, update, delete} 列表。
    3. 该矩阵供前端做菜单/按钮控制；接口鉴权以用户角色名为准。
    """

    __tablename__ = "roles"

    name: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text)
    permissions: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
