"""Post model."""

from sqlalchemy import Column, String, Text
from sqlmodel import Field

from postboard.core.database import BaseModel

TITLE_MAX_LENGTH = 200
CONTENT_MAX_LENGTH = 10000
AUTHOR_MAX_LENGTH = 100


class Post(BaseModel, table=True):
    """A single board message."""

    __tablename__ = "posts"  # type: ignore
    title: str = Field(sa_column=Column(String(TITLE_MAX_LENGTH), nullable=False))
    content: str = Field(sa_column=Column(Text, nullable=False))
    author: str = Field(sa_column=Column(String(AUTHOR_MAX_LENGTH), nullable=False))
    view_count: int = Field(default=0, nullable=False)
