"""Post router."""

from datetime import datetime

from fastapi import APIRouter, Query

from postboard.core.bases.base_router import ERROR_RESPONSES, BaseRouter, page_query, size_query
from postboard.core.database import Database
from postboard.apps.posts.services.post_service import PostService
from postboard.apps.posts.repositories.post_repository import PostRepository
from postboard.apps.posts.schemas.post import PostCreate, PostResponse, PostUpdate


class PostRouter(BaseRouter):
    """Post router class."""

    service: PostService

    def __init__(self, service: PostService):
        super().__init__(
            service=service,
            response_schema=PostResponse,
            create_schema=PostCreate,
            update_schema=PostUpdate,
            prefix="/api/posts",
            tags=["Posts"]
        )

    def _register_routes(self) -> None:
        # Fixed paths go first so "/popular" is never read as an item id
        self._register_search_routes()
        self._register_sorted_routes()
        super()._register_routes()

    def _register_search_routes(self) -> None:
        @self.router.get("/search/title", summary="Search posts by title", responses=ERROR_RESPONSES)
        async def search_by_title(title: str = Query(...), page: int = page_query(), size: int = size_query()):
            return self.page(await self.service.search_by_title(title, page, size))

        @self.router.get("/search/content", summary="Search posts by content", responses=ERROR_RESPONSES)
        async def search_by_content(content: str = Query(...), page: int = page_query(), size: int = size_query()):
            return self.page(await self.service.search_by_content(content, page, size))

        @self.router.get("/search/author", summary="Search posts by author", responses=ERROR_RESPONSES)
        async def search_by_author(author: str = Query(...), page: int = page_query(), size: int = size_query()):
            return self.page(await self.service.search_by_author(author, page, size))

        @self.router.get(
            "/search/keyword",
            summary="Search title, content and author at once",
            responses=ERROR_RESPONSES,
        )
        async def search_by_keyword(keyword: str = Query(...), page: int = page_query(), size: int = size_query()):
            return self.page(await self.service.search_by_keyword(keyword, page, size))

        @self.router.get(
            "/search/period",
            summary="Posts created within a date-time range",
            responses=ERROR_RESPONSES,
        )
        async def search_by_period(
            start: datetime = Query(..., description="Inclusive lower bound (ISO-8601)"),
            end: datetime = Query(..., description="Inclusive upper bound (ISO-8601)"),
            page: int = page_query(),
            size: int = size_query(),
        ):
            return self.page(await self.service.get_created_between(start, end, page, size))

    def _register_sorted_routes(self) -> None:
        @self.router.get("/popular", summary="Posts by view count", responses=ERROR_RESPONSES)
        async def popular_posts(page: int = page_query(), size: int = size_query()):
            return self.page(await self.service.get_popular(page, size))

        @self.router.get("/latest", summary="Posts by creation time", responses=ERROR_RESPONSES)
        async def latest_posts(page: int = page_query(), size: int = size_query()):
            return self.page(await self.service.get_latest(page, size))


def get_post_repository(database: Database) -> PostRepository:
    """Get post repository instance."""
    return PostRepository(database.get_session)


def get_post_service(database: Database) -> PostService:
    """Get post service instance."""
    repository = get_post_repository(database)
    return PostService(repository)


def build_post_router(database: Database) -> APIRouter:
    return PostRouter(get_post_service(database)).get_router()
