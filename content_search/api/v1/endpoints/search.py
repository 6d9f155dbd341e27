"""
Suggestion endpoint - prefix search across every content type of a site.
A content type whose query fails contributes no results.
"""

from typing import Annotated

from elasticsearch import AsyncElasticsearch
from fastapi import APIRouter, Depends, Query

from content_search.config import get_settings
from content_search.schemas.search import SuggestResponse
from content_search.search.elasticsearch_client import get_elasticsearch
from content_search.search.suggest import SuggestService, parse_types

router = APIRouter()
settings = get_settings()


@router.get("/suggest", response_model=SuggestResponse)
async def suggest_endpoint(
    es: Annotated[AsyncElasticsearch, Depends(get_elasticsearch)],
    site: str = Query(..., min_length=1),
    search_term: str = Query(..., alias="searchTerm", min_length=1),
    types: str | None = Query(None, description="Comma-separated content types, default all"),
):
    """Stored records of the site's content whose searchable fields match the prefix."""
    service = SuggestService(es, size=settings.suggest_size, min_score=settings.suggest_min_score)
    results = await service.suggest(site, search_term, parse_types(types))
    return SuggestResponse(site=site, search_term=search_term, results=results, count=len(results))
