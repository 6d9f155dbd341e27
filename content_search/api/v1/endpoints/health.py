"""
Health checks - liveness of the API process and readiness of the search cluster.
"""

from typing import Annotated

from elastic_transport import TransportError
from elasticsearch import ApiError, AsyncElasticsearch
from fastapi import APIRouter, Depends, Response, status

from content_search.config import get_settings
from content_search.search.elasticsearch_client import get_elasticsearch

router = APIRouter()
settings = get_settings()


@router.get("")
async def health():
    """Liveness: is the process up?"""
    return {"status": "ok", "app": settings.app_name}


@router.get("/ready")
async def ready(es: Annotated[AsyncElasticsearch, Depends(get_elasticsearch)], response: Response):
    """Readiness: suggestions need a reachable search cluster."""
    try:
        reachable = await es.ping()
    except (ApiError, TransportError):
        reachable = False
    if not reachable:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {"status": "unavailable", "search": False}
    return {"status": "ready", "search": True}
