"""
Settings and mappings for the per-site content index.
Every content type lives in the same index, told apart by `type`; the
type-prefixed text fields are edge n-gram analysed for prefix suggestions.
"""

from content_search.config import Settings, get_settings

NGRAM_ANALYZER = "nGram_analyzer"
KEYWORD_ANALYZER = "keyword_analyzer"

TYPE_FIELD_PREFIXES = ("video", "series", "article", "event", "audio", "photo")

# Prefixes that carry an author / people block
_AUTHOR_PREFIXES = ("article", "audio", "photo")
_PEOPLE_PREFIXES = ("video", "series")


def _analysis() -> dict:
    return {
        "tokenizer": {
            "nGram_tokenizer": {
                "type": "edge_ngram",
                "min_gram": 1,
                "max_gram": 20,
                "token_chars": ["letter", "digit"],
            }
        },
        "analyzer": {
            NGRAM_ANALYZER: {
                "type": "custom",
                "tokenizer": "nGram_tokenizer",
                "filter": ["lowercase", "asciifolding"],
            },
            KEYWORD_ANALYZER: {
                "type": "custom",
                "tokenizer": "keyword",
                "filter": ["lowercase", "asciifolding"],
            },
        },
    }


def _text() -> dict:
    return {"type": "text", "analyzer": NGRAM_ANALYZER, "search_analyzer": "standard"}


def _names() -> dict:
    return {"properties": {"name": _text()}}


def content_mappings() -> dict:
    """Field mappings shared by every site index."""
    properties: dict[str, dict] = {
        "type": {"type": "keyword"},
        "suggestTitle": {"type": "text", "analyzer": KEYWORD_ANALYZER},
        "status": {"type": "keyword"},
        "isTrailer": {"type": "boolean"},
        "free": {"type": "boolean"},
        "year": {"type": "keyword"},
        "parentalRating": {"type": "keyword"},
        "eventVenue": _text(),
        "eventTime": {"type": "keyword"},
        "eventDate": {"type": "keyword"},
        "publishedDate": {"type": "date", "format": "epoch_millis||strict_date_optional_time"},
        # Full record for client-side reconstitution; stored, never searched
        "data": {"type": "object", "enabled": False},
    }
    for prefix in TYPE_FIELD_PREFIXES:
        properties[f"{prefix}Title"] = _text()
        properties[f"{prefix}Description"] = _text()
        properties[f"{prefix}PrimaryCategory"] = _text()
        properties[f"{prefix}Categories"] = _names()
        properties[f"{prefix}Tags"] = _names()
    for prefix in _AUTHOR_PREFIXES:
        properties[f"{prefix}Author"] = _text()
    for prefix in _PEOPLE_PREFIXES:
        properties[f"{prefix}People"] = _names()
    return {"properties": properties}


def content_index_template(settings: Settings | None = None) -> dict:
    """Settings + mappings body for creating a site index."""
    settings = settings or get_settings()
    return {
        "settings": {
            "index": {
                "number_of_shards": settings.es_shards,
                "number_of_replicas": settings.es_replicas,
            },
            "analysis": _analysis(),
        },
        "mappings": content_mappings(),
    }
