"""Post service."""

from datetime import datetime
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo

from postboard.core import exceptions
from postboard.core.config import settings
from postboard.core.bases.base_service import MAX_PAGE_SIZE, BaseService
from postboard.core.response.schemas import PageResponse
from postboard.apps.posts.models.post import (
    AUTHOR_MAX_LENGTH,
    CONTENT_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    Post,
)
from postboard.apps.posts.repositories.post_repository import PostRepository, PostSearch

TEXT_FIELDS = {
    "title": TITLE_MAX_LENGTH,
    "content": CONTENT_MAX_LENGTH,
    "author": AUTHOR_MAX_LENGTH,
}


def clean_text_fields(data: Dict[str, Any]) -> Dict[str, str]:
    """Trim title/content/author and enforce their length bounds.

    Raises ValidationException naming the first offending field.
    """
    cleaned: Dict[str, str] = {}
    for field, max_length in TEXT_FIELDS.items():
        value = data.get(field)
        if not isinstance(value, str) or not value.strip():
            raise exceptions.ValidationException.for_field(
                field, f"{field.capitalize()} is required", code="REQUIRED"
            )
        value = value.strip()
        if len(value) > max_length:
            raise exceptions.ValidationException.for_field(
                field,
                f"{field.capitalize()} must be between 1 and {max_length} characters",
                code="TOO_LONG",
            )
        cleaned[field] = value
    return cleaned


def to_local_time(value: datetime) -> datetime:
    """Convert an aware datetime to naive wall-clock time in the configured zone."""
    if value.tzinfo is None:
        return value
    return value.astimezone(ZoneInfo(settings.TIME_ZONE)).replace(tzinfo=None)


class PostService(BaseService[Post]):
    """Post service class."""

    repository: PostRepository

    def __init__(self, repository: PostRepository):
        super().__init__(repository)

    async def _validate_create(self, create_data: Dict[str, Any]) -> Dict[str, Any]:
        cleaned = clean_text_fields(create_data)
        cleaned["view_count"] = 0
        return cleaned

    async def _validate_update(self, item_id: int, update_data: Dict[str, Any]) -> Dict[str, Any]:
        # Title, content and author are replaced together; nothing else is writable
        return clean_text_fields(update_data)

    def _validate_term(self, field: str, term: Optional[str]) -> str:
        if term is None or not term.strip():
            raise exceptions.ValidationException.for_field(
                field, f"Search {field} is required", code="REQUIRED"
            )
        return term.strip()

    async def get_by_id(self, item_id: Any) -> Post:
        """Return a post and count the read. Every call adds exactly one view."""
        item_id = self._validate_id(item_id)
        with self._repository_errors("get"):
            post = await self.repository.increment_view_count(item_id)
        if post is None:
            raise self._not_found(item_id)
        return post

    async def get_list(self, page: int = 0, size: int = MAX_PAGE_SIZE) -> PageResponse:
        return await self.get_latest(page, size)

    async def search(
        self, intent: PostSearch, field: str, term: Optional[str], page: int, size: int
    ) -> PageResponse:
        term = self._validate_term(field, term)
        self._validate_page(page, size)
        with self._repository_errors("search"):
            return await self.repository.search(intent, term, page, size)

    async def search_by_title(self, title: Optional[str], page: int = 0, size: int = MAX_PAGE_SIZE) -> PageResponse:
        return await self.search(PostSearch.TITLE, "title", title, page, size)

    async def search_by_content(self, content: Optional[str], page: int = 0, size: int = MAX_PAGE_SIZE) -> PageResponse:
        return await self.search(PostSearch.CONTENT, "content", content, page, size)

    async def search_by_author(self, author: Optional[str], page: int = 0, size: int = MAX_PAGE_SIZE) -> PageResponse:
        return await self.search(PostSearch.AUTHOR, "author", author, page, size)

    async def search_by_keyword(self, keyword: Optional[str], page: int = 0, size: int = MAX_PAGE_SIZE) -> PageResponse:
        return await self.search(PostSearch.ALL_FIELDS, "keyword", keyword, page, size)

    async def get_popular(self, page: int = 0, size: int = MAX_PAGE_SIZE) -> PageResponse:
        self._validate_page(page, size)
        with self._repository_errors("list"):
            return await self.repository.list_popular(page, size)

    async def get_latest(self, page: int = 0, size: int = MAX_PAGE_SIZE) -> PageResponse:
        self._validate_page(page, size)
        with self._repository_errors("list"):
            return await self.repository.list_latest(page, size)

    async def get_created_between(
        self, start: datetime, end: datetime, page: int = 0, size: int = MAX_PAGE_SIZE
    ) -> PageResponse:
        start, end = to_local_time(start), to_local_time(end)
        if start > end:
            raise exceptions.ValidationException.for_field(
                "start", "Start of the period must not be after its end"
            )
        self._validate_page(page, size)
        with self._repository_errors("list"):
            return await self.repository.list_created_between(start, end, page, size)
