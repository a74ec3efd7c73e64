"""数据库会话管理。"""

import sqlite3
from collections.abc import Generator

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from sab_api.core.config import get_settings


def _set_sqlite_pragma(dbapi_connection, _connection_record) -> None:
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def enable_sqlite_foreign_keys(target: Engine) -> None:
    """SQLite 默认不校验外键，需在每个连接上显式开启。"""
    event.listen(target, "connect", _set_sqlite_pragma)


def build_engine(database_url: str) -> Engine:
    """按连接串创建引擎。"""
    if database_url.startswith("sqlite"):
        created = create_engine(database_url, future=True, connect_args={"check_same_thread": False})
        enable_sqlite_foreign_keys(created)
        return created
    # 开启连接预检查以减少僵尸连接影响。
    return create_engine(database_url, future=True, pool_pre_ping=True)


settings = get_settings()

# 全局数据库引擎。
engine = build_engine(settings.database_url)
# 统一会话工厂，路由层通过依赖注入获取短生命周期会话。
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, class_=Session)


def get_db() -> Generator[Session, None, None]:
    """为每个请求提供独立数据库会话。"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
