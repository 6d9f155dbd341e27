"""One transformer per content type: content record -> index document."""

from content_search.transformers.articles import ArticleTransformer
from content_search.transformers.audio import AudioTransformer
from content_search.transformers.base import (
    ContentTransformer,
    extract_optional_title,
    flatten_categories,
    flatten_people,
    flatten_tags,
)
from content_search.transformers.events import EventTransformer
from content_search.transformers.photos import PhotoTransformer
from content_search.transformers.series import SeriesTransformer
from content_search.transformers.videos import VideoTransformer, title_suggestions

__all__ = [
    "ArticleTransformer",
    "AudioTransformer",
    "ContentTransformer",
    "EventTransformer",
    "PhotoTransformer",
    "SeriesTransformer",
    "VideoTransformer",
    "extract_optional_title",
    "flatten_categories",
    "flatten_people",
    "flatten_tags",
    "title_suggestions",
]
