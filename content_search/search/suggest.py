"""
Autosuggest queries against a site index.
One fixed multi_match per content type, run concurrently; the stored `data`
of every hit is returned in content type order.
"""

import asyncio
import logging
from typing import Any

from elastic_transport import TransportError
from elasticsearch import ApiError, AsyncElasticsearch

from content_search.schemas.content import ContentType
from content_search.search.templates import NGRAM_ANALYZER

logger = logging.getLogger(__name__)

SUGGEST_FIELDS: dict[ContentType, list[str]] = {
    ContentType.VIDEO: [
        "videoTitle", "videoPrimaryCategory", "videoCategories.name", "videoPeople.name", "videoTags.name",
    ],
    ContentType.SERIES: [
        "seriesTitle", "seriesPrimaryCategory", "seriesCategories.name", "seriesPeople.name", "seriesTags.name",
    ],
    ContentType.ARTICLE: [
        "articleTitle", "articleAuthor", "articlePrimaryCategory", "articleCategories.name", "articleTags.name",
    ],
    ContentType.EVENT: [
        "eventTitle", "eventPrimaryCategory", "eventCategories.name", "eventTags.name",
    ],
    ContentType.AUDIO: [
        "audioTitle", "audioAuthor", "audioPrimaryCategory", "audioCategories.name", "audioTags.name",
    ],
    ContentType.PHOTO: [
        "photoTitle", "photoAuthor", "photoPrimaryCategory", "photoCategories.name", "photoTags.name",
    ],
}


def parse_types(raw: str | None) -> list[ContentType]:
    """Comma-separated content types ("video,series"); unknown names are ignored, empty means all."""
    if not raw:
        return list(ContentType)
    known = {content_type.value: content_type for content_type in ContentType}
    types = [known[name.strip().lower()] for name in raw.split(",") if name.strip().lower() in known]
    return types or list(ContentType)


class SuggestService:
    def __init__(self, es: AsyncElasticsearch, size: int = 18, min_score: float = 12):
        self.es = es
        self.size = size
        self.min_score = min_score

    @staticmethod
    def build_query(content_type: ContentType, search_term: str) -> dict[str, Any]:
        return {
            "bool": {
                "must": {
                    "multi_match": {
                        "query": search_term,
                        "type": "best_fields",
                        "analyzer": NGRAM_ANALYZER,
                        "fields": SUGGEST_FIELDS[content_type],
                    }
                },
                "filter": {"term": {"type": content_type.value}},
            }
        }

    async def _suggest_type(self, index: str, content_type: ContentType, search_term: str) -> list[dict]:
        try:
            response = await self.es.search(
                index=index,
                size=self.size,
                min_score=self.min_score,
                query=self.build_query(content_type, search_term),
            )
        except (ApiError, TransportError) as exc:
            logger.warning(
                "Suggest query failed: index=%s type=%s term=%r error=%s",
                index, content_type.value, search_term, exc,
            )
            return []
        body = getattr(response, "body", response)
        records = (hit["_source"].get("data") for hit in body["hits"]["hits"])
        return [record for record in records if record is not None]

    async def suggest(
        self, site: str, search_term: str, types: list[ContentType] | None = None
    ) -> list[dict]:
        """Stored records of every content item matching the search prefix."""
        types = types or list(ContentType)
        results = await asyncio.gather(
            *(self._suggest_type(site, content_type, search_term) for content_type in types)
        )
        return [record for hits in results for record in hits]
