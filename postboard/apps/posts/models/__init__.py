"""Post board models."""

from .post import Post

__all__ = ["Post"]
