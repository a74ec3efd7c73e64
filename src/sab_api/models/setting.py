"""键值配置模型。"""

from sqlalchemy import Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from sab_api.models.base import Base, IntegerPrimaryKeyMixin, TimestampMixin


class Setting(Base, IntegerPrimaryKeyMixin, TimestampMixin):
    """租户级或全局配置项。

    自然键为 (tenant_id, key)；tenant_id 为空表示全局。数据库对 NULL 不做唯一约束，
    全局作用域的去重由写入服务保证。
    """

    __tablename__ = "settings"
    __table_args__ = (UniqueConstraint("tenant_id", "key", name="uk_setting_scope_key"),)

    tenant_id: Mapped[int | None] = mapped_column(Integer, index=True)
    key: Mapped[str] = mapped_column(String(128), nullable=False)
    value: Mapped[str | None] = mapped_column(Text)
