"""Shared schema configuration."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Model exchanged with clients using camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PageInfo(CamelModel):
    current_page: int
    page_limit: int
    total_count: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool
