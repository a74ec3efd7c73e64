"""数据库基础模型导出与建表入口。

生产环境推荐通过迁移脚本维护结构；`create_schema` 仅在 `SAB_DB_AUTO_CREATE` 开启时于启动阶段调用。
"""

from sqlalchemy import Engine

import sab_api.models  # noqa: F401
from sab_api.models.base import Base

__all__ = ["Base", "create_schema"]


def create_schema(target: Engine) -> None:
    """按模型元数据创建缺失的表。"""
    Base.metadata.create_all(bind=target)
