"""
Series documents.
Legacy: series are indexed straight from the change event image, without a
content API call; the image is decoded to plain JSON first.
"""

from typing import Any

from content_search.schemas.content import ContentType, SourceMode
from content_search.transformers.base import ContentTransformer, flatten_people, gist_fields


class SeriesTransformer(ContentTransformer):
    content_type = ContentType.SERIES
    source_mode = SourceMode.EVENT_IMAGE

    def to_document(self, series: dict[str, Any]) -> dict[str, Any]:
        return {
            "type": self.content_type.value,
            **gist_fields("series", series),
            "seriesPeople": flatten_people(series.get("creditBlocks")),
            "status": (series.get("showDetails") or {}).get("status"),
            "data": series,
        }
