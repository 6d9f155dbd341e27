"""
Explicit wiring of source tables to transformers.

A table route classifies the active image of an event into a content type;
the registry maps that content type to the transformer (and, through it,
the gateway) that handles it.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

import httpx
from elasticsearch import AsyncElasticsearch

from content_search.config import Settings
from content_search.content.client import ContentClient
from content_search.core.errors import UnsupportedTypeError
from content_search.schemas.content import ContentType, Identity
from content_search.schemas.events import ChangeEvent
from content_search.search.gateway import IndexGateway
from content_search.search.templates import content_index_template
from content_search.transformers import (
    ArticleTransformer,
    AudioTransformer,
    ContentTransformer,
    EventTransformer,
    PhotoTransformer,
    SeriesTransformer,
    VideoTransformer,
)


@dataclass(frozen=True)
class TableRoute:
    """Classification rule for the images of one source table.

    Either `discriminator` names an image field whose value selects the type
    from `content_types`, or every image maps to `default`. When
    `exclude_field` is present on the image the record is an unsupported
    subtype.
    """

    discriminator: str | None = None
    content_types: dict[str, ContentType] = field(default_factory=dict)
    default: ContentType | None = None
    exclude_field: str | None = None

    def classify(self, event: ChangeEvent) -> ContentType:
        if self.exclude_field and event.has_field(self.exclude_field):
            raise UnsupportedTypeError(
                f"{self.exclude_field}={event.field(self.exclude_field)!r} is not indexed"
            )
        if self.discriminator is None:
            return self.default
        value = event.field(self.discriminator)
        content_type = self.content_types.get(value) if isinstance(value, str) else None
        if content_type is None:
            raise UnsupportedTypeError(f"unsupported {self.discriminator} {value!r}")
        return content_type


TABLE_ROUTES: dict[str, TableRoute] = {
    "CONTENT.CONTENT_METADATA": TableRoute(
        discriminator="objectKey", content_types={"video": ContentType.VIDEO}
    ),
    # Only series without an objectType are indexed
    "CONTENT.SERIES": TableRoute(default=ContentType.SERIES, exclude_field="objectType"),
    "CONTENT.ARTICLE": TableRoute(default=ContentType.ARTICLE),
    "CONTENT.EVENT": TableRoute(discriminator="contentType", content_types={"EVENT": ContentType.EVENT}),
    "CONTENT.AUDIO": TableRoute(discriminator="contentType", content_types={"AUDIO": ContentType.AUDIO}),
    "CONTENT.PHOTOGALLERY": TableRoute(
        discriminator="contentType", content_types={"IMAGE": ContentType.PHOTO}
    ),
}


class ContentRegistry:
    """Source table -> route, content type -> transformer."""

    def __init__(
        self,
        transformers: Iterable[ContentTransformer],
        routes: dict[str, TableRoute] | None = None,
    ):
        self.transformers = {transformer.content_type: transformer for transformer in transformers}
        self.routes = dict(TABLE_ROUTES if routes is None else routes)

    def route(self, source_table: str) -> TableRoute | None:
        return self.routes.get(source_table)

    def transformer(self, content_type: ContentType) -> ContentTransformer:
        try:
            return self.transformers[content_type]
        except KeyError:
            raise UnsupportedTypeError(f"no transformer registered for {content_type.value}") from None


def build_registry(es: AsyncElasticsearch, http: httpx.AsyncClient, settings: Settings) -> ContentRegistry:
    """Registry for one invocation: one gateway, one content client per identity."""
    gateway = IndexGateway(es, content_index_template(settings))
    clients = {
        identity: ContentClient(http, settings.content_api_url, identity) for identity in Identity
    }
    anonymous = clients[Identity.ANONYMOUS]
    return ContentRegistry(
        [
            VideoTransformer(
                gateway, clients[VideoTransformer.identity], skip_words=settings.suggest_skip_words
            ),
            SeriesTransformer(gateway),
            ArticleTransformer(gateway, anonymous),
            EventTransformer(gateway, anonymous),
            AudioTransformer(gateway, anonymous),
            PhotoTransformer(gateway, anonymous),
        ]
    )
