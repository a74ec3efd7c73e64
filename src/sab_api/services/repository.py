"""通用仓储。

对单个模型封装最常用的读写操作；主键由数据库自增分配，写入后通过 flush 回填。
事务边界由调用方控制，仓储本身不提交。
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.orm import Session

from sab_api.models.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class Repository(Generic[ModelT]):
    """单模型仓储。"""

    def __init__(self, db: Session, model: type[ModelT]) -> None:
        self.db = db
        self.model = model

    def get(self, entity_id: int) -> ModelT | None:
        return self.db.get(self.model, entity_id)

    def lock(self, entity_id: int, *, key_share: bool = False) -> ModelT | None:
        """读取并加行锁（SQLite 下为空操作）。

        key_share=True 时使用 `FOR KEY SHARE`，仅阻止并发删除/主键变更，不阻塞普通更新。
        """
        stmt = select(self.model).where(self.model.id == entity_id)
        if key_share:
            stmt = stmt.with_for_update(read=True, key_share=True)
        else:
            stmt = stmt.with_for_update()
        return self.db.execute(stmt).scalar_one_or_none()

    def find(
        self,
        *criteria: ColumnElement[bool],
        order_by: tuple[Any, ...] | None = None,
        limit: int | None = None,
    ) -> list[ModelT]:
        stmt = select(self.model).where(*criteria)
        stmt = stmt.order_by(*(order_by if order_by is not None else (self.model.id,)))
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def first(self, *criteria: ColumnElement[bool]) -> ModelT | None:
        stmt = select(self.model).where(*criteria).order_by(self.model.id).limit(1)
        return self.db.execute(stmt).scalar_one_or_none()

    def exists(self, *criteria: ColumnElement[bool]) -> bool:
        stmt = select(self.model.id).where(*criteria).limit(1)
        return self.db.execute(stmt).scalar_one_or_none() is not None

    def count(self, *criteria: ColumnElement[bool]) -> int:
        stmt = select(func.count()).select_from(self.model).where(*criteria)
        return int(self.db.execute(stmt).scalar_one())

    def create(self, **values: Any) -> ModelT:
        entity = self.model(**values)
        self.db.add(entity)
        # flush 后主键与默认值已由数据库回填。
        self.db.flush()
        return entity

    def update(self, entity: ModelT, values: dict[str, Any]) -> ModelT:
        for name, value in values.items():
            setattr(entity, name, value)
        self.db.flush()
        return entity

    def delete(self, entity: ModelT) -> None:
        self.db.delete(entity)
        self.db.flush()
