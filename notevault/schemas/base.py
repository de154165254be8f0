"""Shared schema base: camelCase on the wire, snake_case in Python."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class CamelModel(BaseModel):
    """Accepts either field names or camelCase aliases; serializes by alias."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        pages = (total + limit - 1) // limit if total > 0 else 0
        return cls(page=page, limit=limit, total=total, pages=pages)
