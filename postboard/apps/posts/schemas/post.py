"""Post schemas."""

from datetime import datetime

from pydantic import BaseModel

from postboard.core.response.schemas import CamelModel


class PostCreate(BaseModel):
    """Schema for creating a post."""
    title: str
    content: str
    author: str


class PostUpdate(PostCreate):
    """Schema for updating a post; all three fields are replaced."""


class PostResponse(CamelModel):
    id: int
    title: str
    content: str
    author: str
    view_count: int
    created_at: datetime
    updated_at: datetime
