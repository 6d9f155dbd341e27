"""Suggestion search request/response schemas - REST API contract."""

from typing import Any

from pydantic import BaseModel, Field


class SuggestResponse(BaseModel):
    site: str
    search_term: str = Field(serialization_alias="searchTerm")
    results: list[dict[str, Any]]
    count: int
