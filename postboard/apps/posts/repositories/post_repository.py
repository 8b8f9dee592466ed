"""Post repository."""

from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import func, or_, update
from sqlmodel import select

from postboard.core.bases.base_repository import BaseRepository
from postboard.core.database import updated_at_expression
from postboard.core.response import schemas
from postboard.apps.posts.models.post import Post


def _contains(column: Any, term: str) -> Any:
    """Case-insensitive substring match; % and _ in the term are literal."""
    return func.lower(column).contains(term.lower(), autoescape=True)


def title_contains(term: str) -> Any:
    return _contains(Post.title, term)


def content_contains(term: str) -> Any:
    return _contains(Post.content, term)


def author_contains(term: str) -> Any:
    return _contains(Post.author, term)


def title_or_content_contains(term: str) -> Any:
    return or_(title_contains(term), content_contains(term))


def any_field_contains(term: str) -> Any:
    return or_(title_contains(term), content_contains(term), author_contains(term))


class PostSearch(str, Enum):
    """Fields a text search can match against."""

    TITLE = "title"
    CONTENT = "content"
    AUTHOR = "author"
    TITLE_OR_CONTENT = "title_or_content"
    ALL_FIELDS = "all_fields"


SEARCH_CRITERIA: Dict[PostSearch, Callable[[str], Any]] = {
    PostSearch.TITLE: title_contains,
    PostSearch.CONTENT: content_contains,
    PostSearch.AUTHOR: author_contains,
    PostSearch.TITLE_OR_CONTENT: title_or_content_contains,
    PostSearch.ALL_FIELDS: any_field_contains,
}

LATEST_FIRST = [Post.created_at.desc()]  # type: ignore
MOST_VIEWED_FIRST = [Post.view_count.desc()]  # type: ignore


class PostRepository(BaseRepository[Post]):
    """Post repository class."""

    model = Post

    async def search(
        self, intent: PostSearch, term: str, page: int, size: int
    ) -> schemas.PageResponse:  # type:ignore
        """Page of posts matching ``term`` on the fields named by ``intent``, newest first."""
        criterion = SEARCH_CRITERIA[intent](term)
        async with self.get_session() as db:
            try:
                stmt = select(Post).where(criterion)
                return await self._paginate(db, stmt, page, size, LATEST_FIRST)
            except SQLAlchemyError as e:
                self._handle_db_error(e, f"search:{intent.value}")

    async def list_latest(self, page: int, size: int) -> schemas.PageResponse:
        return await self.list(page, size, LATEST_FIRST)

    async def list_popular(self, page: int, size: int) -> schemas.PageResponse:
        return await self.list(page, size, MOST_VIEWED_FIRST)

    async def list_created_between(
        self, start: datetime, end: datetime, page: int, size: int
    ) -> schemas.PageResponse:  # type:ignore
        """Posts whose created_at lies in the inclusive range, newest first."""
        async with self.get_session() as db:
            try:
                stmt = select(Post).where(
                    Post.created_at >= start,  # type: ignore
                    Post.created_at <= end,  # type: ignore
                )
                return await self._paginate(db, stmt, page, size, LATEST_FIRST)
            except SQLAlchemyError as e:
                self._handle_db_error(e, "list_created_between")

    async def increment_view_count(self, item_id: int) -> Optional[Post]:
        """Add one view and return the post, in a single transaction.

        The counter is incremented in SQL, so concurrent reads each add
        exactly one view.
        """
        stmt = (
            update(Post)
            .where(Post.id == item_id)  # type: ignore
            .values(
                view_count=Post.view_count + 1,
                updated_at=updated_at_expression(Post),
            )
        )
        async with self.get_session() as db:
            try:
                conn = await db.connection()
                result = await conn.execute(stmt)
                if result.rowcount == 0:
                    await db.rollback()
                    return None

                post = await db.get(Post, item_id)
                await db.commit()
                return post
            except SQLAlchemyError as e:
                await db.rollback()
                self._handle_db_error(e, "increment_view_count")
