"""
File: app/db/repositories/base.py
Description: 通用异步 Repository 基类

本模块定义了 BaseRepository，封装了通用的读写操作。
所有领域的 Repository 应继承此类，以减少样板代码。

特性：
- 泛型支持: BaseRepository[ModelType, CreateSchemaType]
- 纯异步: 基于 sqlalchemy.ext.asyncio
- 只 flush 不 commit: 事务边界由 Service 层控制

Created: 2025-11-25
Updated: 2026-03-02 (更新改由领域仓储的条件 UPDATE 完成，绑定记录从不删除)
"""

from typing import Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.base import Base

# 定义泛型变量
ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)


class BaseRepository(Generic[ModelType, CreateSchemaType]):
    """
    通用仓储基类。

    参数:
    - ModelType: SQLAlchemy 模型类 (如 SteamLink)
    - CreateSchemaType: 创建数据的 Pydantic 模型
    """

    def __init__(self, model: type[ModelType], session: AsyncSession):
        self.model = model
        self.session = session

    # --------------------------------------------------------------------------
    # 查询操作 (Read)
    # --------------------------------------------------------------------------

    async def count(self) -> int:
        """
        获取记录总数。

        Returns:
            int: 记录总数
        """
        stmt = select(func.count()).select_from(self.model)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    # --------------------------------------------------------------------------
    # 写入操作 (Create)
    # --------------------------------------------------------------------------

    async def create(self, obj_in: CreateSchemaType) -> ModelType:
        """
        创建新记录。

        自动将 Pydantic schema 转换为 dict，并创建 ORM 对象。
        注意：此方法会自动 flush 到数据库 (唯一约束冲突在此抛出 IntegrityError)，
        但不会 commit（由 Service 层控制事务）。
        """
        obj_in_data = obj_in.model_dump(exclude_unset=True)
        db_obj = self.model(**obj_in_data)

        self.session.add(db_obj)
        await self.session.flush()
        await self.session.refresh(db_obj)

        return db_obj
