from contextlib import contextmanager
from typing import Any, Dict, Generic, Iterator, TypeVar, Union

from pydantic import BaseModel
from sqlmodel import SQLModel

from postboard.core import exceptions
from postboard.core.bases.base_repository import BaseRepository, RepositoryError
from postboard.core.logger import get_logger
from postboard.core.response.schemas import PageResponse

T = TypeVar("T", bound=SQLModel)

logger = get_logger("service")

MAX_PAGE_SIZE = 5

# Largest value a 64-bit signed INTEGER column or OFFSET can hold
MAX_DB_INTEGER = 2**63 - 1


class BaseService(Generic[T]):
    """CRUD orchestration on top of a repository.

    Every public method validates its arguments before the repository is
    touched. Subclasses customise behaviour through the ``_validate_*`` hooks.
    """

    def __init__(self, repository: BaseRepository[T]):
        self.repository = repository

    @property
    def model_name(self) -> str:
        return self.repository.model.__name__

    # ----------------- validation ----------------- #
    def _validate_id(self, item_id: Any) -> int:
        if (
            isinstance(item_id, bool)
            or not isinstance(item_id, int)
            or not 0 < item_id <= MAX_DB_INTEGER
        ):
            raise exceptions.ValidationException.for_field(
                "id", f"Invalid {self.model_name.lower()} id: {item_id}"
            )
        return item_id

    def _validate_page(self, page: int, size: int) -> None:
        if page < 0:
            raise exceptions.ValidationException.for_field(
                "page", "Page index must be 0 or greater"
            )
        if size < 1 or size > MAX_PAGE_SIZE:
            raise exceptions.ValidationException.for_field(
                "size", f"Page size must be between 1 and {MAX_PAGE_SIZE}"
            )
        if page * size > MAX_DB_INTEGER:
            raise exceptions.ValidationException.for_field(
                "page", "Page index is out of range"
            )

    async def _validate_create(self, create_data: Dict[str, Any]) -> Dict[str, Any]:
        """Validate data before creation and return the values to store."""
        return create_data

    async def _validate_update(self, item_id: int, update_data: Dict[str, Any]) -> Dict[str, Any]:
        """Validate data before update and return the values to store."""
        return update_data

    def _not_found(self, item_id: Any) -> exceptions.NotFoundException:
        return exceptions.NotFoundException(
            detail=f"{self.model_name} not found. ID: {item_id}"
        )

    @contextmanager
    def _repository_errors(self, operation: str) -> Iterator[None]:
        try:
            yield
        except RepositoryError as e:
            logger.error("%s %s failed: %s", self.model_name, operation, e)
            raise exceptions.ServiceException(
                detail=f"Failed to {operation} {self.model_name.lower()}"
            ) from e

    # ----------------- CRUD ----------------- #
    async def get_by_id(self, item_id: Any) -> T:
        item_id = self._validate_id(item_id)
        with self._repository_errors("get"):
            item = await self.repository.get(item_id)
        if item is None:
            raise self._not_found(item_id)
        return item

    async def get_list(self, page: int = 0, size: int = MAX_PAGE_SIZE) -> PageResponse:
        self._validate_page(page, size)
        with self._repository_errors("list"):
            return await self.repository.list(page, size)

    async def create(self, data: Union[Dict[str, Any], BaseModel]) -> T:
        create_data = data.model_dump() if isinstance(data, BaseModel) else dict(data)
        create_data = await self._validate_create(create_data)
        with self._repository_errors("create"):
            item = await self.repository.create(create_data)
        logger.info("Created %s id=%s", self.model_name, item.id)  # type: ignore
        return item

    async def update(self, item_id: Any, data: Union[Dict[str, Any], BaseModel]) -> T:
        item_id = self._validate_id(item_id)
        update_data = data.model_dump() if isinstance(data, BaseModel) else dict(data)
        update_data = await self._validate_update(item_id, update_data)
        with self._repository_errors("update"):
            item = await self.repository.update(item_id, update_data)
        if item is None:
            raise self._not_found(item_id)
        logger.info("Updated %s id=%s", self.model_name, item_id)
        return item

    async def delete(self, item_id: Any) -> None:
        item_id = self._validate_id(item_id)
        with self._repository_errors("delete"):
            deleted = await self.repository.delete(item_id)
        if not deleted:
            raise self._not_found(item_id)
        logger.info("Deleted %s id=%s", self.model_name, item_id)
