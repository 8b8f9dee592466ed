from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, Type, TypeVar, Union

from pydantic import BaseModel as PydanticModel
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import SQLModel, func, select
from sqlmodel.ext.asyncio.session import AsyncSession

from postboard.core.database import stamp_created, stamp_updated
from postboard.core.response import schemas

T = TypeVar("T", bound=SQLModel)


class RepositoryError(Exception):
    """Custom exception for repository errors."""

    pass


class BaseRepository(Generic[T]):
    model: Type[T]

    def __init__(self, get_session: Callable[..., Any]):
        self.get_session = get_session

    def _handle_db_error(self, error: SQLAlchemyError, operation: str) -> None:
        """Handle database errors and raise appropriate exceptions."""
        if isinstance(error, IntegrityError):
            raise RepositoryError(
                f"Database integrity error during {operation}: {error}"
            ) from error
        else:
            raise RepositoryError(
                f"Database error during {operation}: {error}"
            ) from error

    def _default_order(self) -> List[Any]:
        return [self.model.id.asc()]  # type: ignore

    async def _paginate(
        self,
        db: AsyncSession,
        stmt: Any,
        page: int,
        size: int,
        order_by: Optional[Sequence[Any]] = None,
    ) -> schemas.PageResponse:
        """Run ``stmt`` as one zero-based page, counting the whole result set."""
        count_stmt = select(func.count()).select_from(stmt.subquery())
        total = (await db.exec(count_stmt)).one()

        ordering = list(order_by or []) + self._default_order()
        result = await db.exec(stmt.order_by(*ordering).offset(page * size).limit(size))
        items = result.all()

        return schemas.PageResponse(
            items=list(items),
            total_elements=total,
            total_pages=(total + size - 1) // size,
            page=page,
            size=size,
        )

    # ----------------- CRUD ----------------- #
    async def get(self, item_id: Any) -> Optional[T]:
        """Get a single item by ID."""
        async with self.get_session() as db:
            try:
                return await db.get(self.model, item_id)
            except SQLAlchemyError as e:
                self._handle_db_error(e, "get")

    async def list(
        self,
        page: int = 0,
        size: int = 5,
        order_by: Optional[Sequence[Any]] = None,
    ) -> schemas.PageResponse:  # type:ignore
        """Get a page of all items."""
        async with self.get_session() as db:
            try:
                return await self._paginate(db, select(self.model), page, size, order_by)
            except SQLAlchemyError as e:
                self._handle_db_error(e, "list")

    async def create(self, obj_in: Union[Dict[str, Any], PydanticModel]) -> T:  # type:ignore
        """Create a new item."""
        if isinstance(obj_in, PydanticModel):
            obj_in = obj_in.model_dump(exclude_unset=True)

        async with self.get_session() as db:
            try:
                obj = self.model(**obj_in)  # type: ignore
                stamp_created(obj)  # type: ignore
                db.add(obj)
                await db.commit()
                await db.refresh(obj)
                return obj
            except SQLAlchemyError as e:
                await db.rollback()
                self._handle_db_error(e, "create")

    async def update(
        self,
        item_id: Any,
        obj_in: Union[Dict[str, Any], PydanticModel],
    ) -> Optional[T]:
        """Update an existing item; returns None when it does not exist."""
        if isinstance(obj_in, PydanticModel):
            update_data = obj_in.model_dump(exclude_unset=True)
        else:
            update_data = dict(obj_in)

        # Identity and audit fields are never taken from input
        for key in ("id", "created_at", "updated_at"):
            update_data.pop(key, None)

        if not update_data:
            raise RepositoryError("No data provided for update")

        async with self.get_session() as db:
            try:
                db_obj = await db.get(self.model, item_id)
                if not db_obj:
                    return None

                for key, value in update_data.items():
                    if hasattr(db_obj, key):
                        setattr(db_obj, key, value)

                stamp_updated(db_obj)  # type: ignore
                await db.commit()
                await db.refresh(db_obj)
                return db_obj
            except SQLAlchemyError as e:
                await db.rollback()
                self._handle_db_error(e, "update")

    async def delete(self, item_id: Any) -> bool:  # type:ignore
        """Permanently delete the item from DB."""
        async with self.get_session() as db:
            try:
                db_obj = await db.get(self.model, item_id)
                if not db_obj:
                    return False

                await db.delete(db_obj)
                await db.commit()
                return True
            except SQLAlchemyError as e:
                await db.rollback()
                self._handle_db_error(e, "delete")
