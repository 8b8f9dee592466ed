from typing import Any, Callable, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Response model serialized with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PageResponse(CamelModel, Generic[T]):
    items: List[T] = []
    total_elements: int = Field(default=0)
    total_pages: int = Field(default=0)
    page: int = Field(default=0)
    size: int = Field(default=5)

    def map(self, func: Callable[[Any], Any]) -> "PageResponse":
        """Return a copy of this page with ``func`` applied to every item."""
        return PageResponse(
            items=[func(item) for item in self.items],
            total_elements=self.total_elements,
            total_pages=self.total_pages,
            page=self.page,
            size=self.size,
        )


class ErrorDetail(BaseModel):
    field: str = ""
    code: str = Field(default="ERROR")
    message: str = Field(default="Unknown Error")
    target: Optional[str] = Field(default=None)


class ErrorResponse(BaseModel):
    success: bool = Field(default=False)
    message: Optional[str] = Field(default=None)
    error_code: str = Field(default="ERROR")
    error_details: List[ErrorDetail] = Field(default=[])
