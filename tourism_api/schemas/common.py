from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageOut(CamelModel):
    is_ok: bool = True
    message: str


class Envelope(CamelModel, Generic[T]):
    is_ok: bool = True
    message: str
    data: Optional[T] = None


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    pages: int
    has_next_page: bool
    has_previous_page: bool


class Page(CamelModel, Generic[T]):
    is_ok: bool = True
    message: str
    data: List[T]
    pagination: Pagination
