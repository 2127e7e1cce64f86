from typing import Any, Generic, List, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy import func, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from lendermatch.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Generic async repository for a single mapped model.

    The primary key column is read from the model's mapper, so models
    keyed by lender_id, metro_id or id share the same lookups. Composite
    keys (programs, lender states) only use the first column here and are
    queried through the specialised repositories instead.

    Type Parameters:
        ModelType: The SQLAlchemy model class this repository manages
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        self.model = model
        self.db = db
        self.pk = inspect(model).primary_key[0]

    async def create(self, **kwargs: Any) -> ModelType:
        """
        Insert a row and return it with server defaults populated.

        Args:
            **kwargs: Column values for the new row

        Returns:
            The refreshed instance
        """
        instance = self.model(**kwargs)
        self.db.add(instance)
        await self.db.flush()
        await self.db.refresh(instance)
        return instance

    async def get_by_id(self, id: UUID) -> Optional[ModelType]:
        stmt = select(self.model).where(self.pk == id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        order_by: Optional[Any] = None,
    ) -> List[ModelType]:
        """
        Page through rows of the model.

        Args:
            skip: Offset into the result set
            limit: Page size
            order_by: Optional ordering clause, applied before paging

        Returns:
            One page of instances
        """
        stmt = select(self.model)
        if order_by is not None:
            stmt = stmt.order_by(order_by)
        result = await self.db.execute(stmt.offset(skip).limit(limit))
        return list(result.scalars().all())

    async def count(self, *criteria: Any) -> int:
        """Count rows matching every given WHERE clause."""
        stmt = select(func.count()).select_from(self.model)
        if criteria:
            stmt = stmt.where(*criteria)
        result = await self.db.execute(stmt)
        return result.scalar_one()
