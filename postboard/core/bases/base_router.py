from typing import Any, Callable, List, Optional, Type

from fastapi import APIRouter, Query, status
from pydantic import BaseModel

from postboard.core.bases.base_service import MAX_PAGE_SIZE, BaseService
from postboard.core.response.handlers import (
    no_content_response,
    paginated_response,
    success_response,
)
from postboard.core.response.schemas import PageResponse

ERROR_RESPONSES = {
    400: {"description": "Invalid request"},
    500: {"description": "Internal server error"},
}


def page_query() -> Any:
    return Query(0, description="Zero-based page index")


def size_query() -> Any:
    return Query(MAX_PAGE_SIZE, description=f"Items per page (1-{MAX_PAGE_SIZE})")


class BaseRouter:
    """Base router class with automatic CRUD endpoints.

    Service exceptions are not caught here; the application's exception
    handlers turn them into error responses.
    """

    def __init__(
        self,
        service: BaseService,
        response_schema: Type[BaseModel],
        tags: Optional[List[str]] = None,
        prefix: str = "",
        create_schema: Optional[Type[BaseModel]] = None,
        update_schema: Optional[Type[BaseModel]] = None,
        dependencies: Optional[List[Callable]] = None
    ):
        self.service = service
        self.tags = tags or [self.__class__.__name__.replace("Router", "")]
        self.prefix = prefix
        self.create_schema = create_schema
        self.update_schema = update_schema
        self.response_schema = response_schema

        # Create router
        self.router = APIRouter(
            prefix=self.prefix,
            tags=self.tags, #type:ignore
            dependencies=dependencies or [] #type:ignore
        )

        # Register routes
        self._register_routes()

    def serialize(self, item: Any) -> BaseModel:
        return self.response_schema.model_validate(item)

    def page(self, page: PageResponse) -> Any:
        return paginated_response(page.map(self.serialize))

    def _register_routes(self) -> None:
        """Register all CRUD routes."""
        self._register_list()
        self._register_create()
        self._register_get_by_id()
        self._register_update()
        self._register_delete()

    def _register_get_by_id(self) -> None:
        """Register GET /{item_id} route."""
        @self.router.get(
            "/{item_id}",
            summary="Get item by ID",
            responses={
                200: {"description": "Item retrieved successfully"},
                404: {"description": "Item not found"},
                **ERROR_RESPONSES,
            }
        )
        async def get_by_id(item_id: int):
            item = await self.service.get_by_id(item_id)
            return success_response(self.serialize(item))

    def _register_list(self) -> None:
        """Register GET / route with pagination."""
        @self.router.get("/", include_in_schema=False)
        @self.router.get(
            "",
            summary="List items",
            responses={
                200: {"description": "Items retrieved successfully"},
                **ERROR_RESPONSES,
            }
        )
        async def list_items(page: int = page_query(), size: int = size_query()):
            return self.page(await self.service.get_list(page=page, size=size))

    def _register_create(self) -> None:
        """Register POST / route."""
        if not self.create_schema:
            return

        @self.router.post("/", status_code=status.HTTP_201_CREATED, include_in_schema=False)
        @self.router.post(
            "",
            status_code=status.HTTP_201_CREATED,
            summary="Create new item",
            responses={
                201: {"description": "Item created successfully"},
                **ERROR_RESPONSES,
            }
        )
        async def create_item(item_data: self.create_schema):  # type: ignore
            item = await self.service.create(item_data)
            return success_response(self.serialize(item), status_code=status.HTTP_201_CREATED)

    def _register_update(self) -> None:
        """Register PUT /{item_id} route."""
        if not self.update_schema:
            return

        @self.router.put(
            "/{item_id}",
            summary="Update item",
            responses={
                200: {"description": "Item updated successfully"},
                404: {"description": "Item not found"},
                **ERROR_RESPONSES,
            }
        )
        async def update_item(
            item_id: int,
            item_data: self.update_schema  # type: ignore
        ):
            item = await self.service.update(item_id, item_data)
            return success_response(self.serialize(item))

    def _register_delete(self) -> None:
        """Register DELETE /{item_id} route (permanent delete)."""
        @self.router.delete(
            "/{item_id}",
            status_code=status.HTTP_204_NO_CONTENT,
            summary="Delete item",
            responses={
                204: {"description": "Item deleted"},
                404: {"description": "Item not found"},
                **ERROR_RESPONSES,
            }
        )
        async def delete_item(item_id: int):
            await self.service.delete(item_id)
            return no_content_response()

    def get_router(self) -> APIRouter:
        """Get the FastAPI router instance."""
        return self.router
