"""租户与身份模型。"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from sab_api.models.base import Base, IntegerPrimaryKeyMixin, TimestampMixin
from sab_api.models.enums import TenantStatus, UserRole, UserStatus


class Tenant(Base, IntegerPrimaryKeyMixin, TimestampMixin):
    """租户实体，代表一个客户组织。"""

    __tablename__ = "tenants"

    # 租户名称，全局唯一。
    name: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    # 租户域名，填写时全局唯一。
    domain: Mapped[str | None] = mapped_column(String(255), unique=True)
    # 租户状态（active/inactive/trial）。
    status: Mapped[str] = mapped_column(String(32), nullable=False, default=TenantStatus.ACTIVE)


class User(Base, IntegerPrimaryKeyMixin, TimestampMixin):
    """用户实体，同时承载本地登录凭据。"""

    __tablename__ = "users"

    # 登录名，全局唯一。
    username: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    # 邮箱，全局唯一。
    email: Mapped[str] = mapped_column(String(256), nullable=False, unique=True)
    # 口令哈希，不存明文，不对外序列化。
    password_hash: Mapped[str] = mapped_column(String(256), nullable=False)
    full_name: Mapped[str | None] = mapped_column(String(128))
    # 角色名（admin/editor/user）。
    role: Mapped[str] = mapped_column(String(32), nullable=False, default=UserRole.USER)
    # 所属租户，为空表示平台级账号；租户存在关联用户时禁止删除。
    tenant_id: Mapped[int | None] = mapped_column(
        ForeignKey("tenants.id", ondelete="RESTRICT"), index=True
    )
    # 用户状态（active/inactive/pending）。
    status: Mapped[str] = mapped_column(String(32), nullable=False, default=UserStatus.ACTIVE)
    # 最近一次登录时间。
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
