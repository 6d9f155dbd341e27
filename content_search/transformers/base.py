"""
Shared document-building helpers and the transformer base class.

Every index document keeps a stable shape: a field whose source is absent or
empty is written as None, never omitted and never an empty list, so the
mapping sees the same keys for every document of a type.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar

from content_search.content.client import ContentClient
from content_search.core.errors import ContentClientError, DocumentBuildError
from content_search.schemas.content import ContentType, Identity, SourceMode
from content_search.schemas.events import IndexAction, decode_image
from content_search.search.gateway import IndexGateway

logger = logging.getLogger(__name__)


def extract_optional_title(field: Any, key: str = "title") -> Any:
    """Display value of an optional nested object.

    The content API encodes "no value" as a missing key, None, or an empty
    object ({}); all three give None.
    """
    if not field or not isinstance(field, dict):
        return None
    return field.get(key)


def _flatten_titles(items: list[dict[str, Any]] | None) -> list[dict[str, Any]] | None:
    if not items:
        return None
    return [{"name": item.get("title")} for item in items]


def flatten_categories(categories: list[dict[str, Any]] | None) -> list[dict[str, Any]] | None:
    """[{title}, ...] -> [{name}, ...]; None for empty or absent input."""
    return _flatten_titles(categories)


def flatten_tags(tags: list[dict[str, Any]] | None) -> list[dict[str, Any]] | None:
    """[{title}, ...] -> [{name}, ...]; None for empty or absent input."""
    return _flatten_titles(tags)


def flatten_people(credit_blocks: list[dict[str, Any]] | None) -> list[dict[str, Any]] | None:
    """All credits of all credit blocks, in order, as [{name}, ...].

    Blocks without a `credits` list contribute nothing; None when no credit is found.
    """
    people = [
        {"name": credit.get("title")}
        for block in credit_blocks or []
        for credit in block.get("credits") or []
    ]
    return people or None


def gist_fields(prefix: str, record: dict[str, Any]) -> dict[str, Any]:
    """Title, description, primary category, categories and tags under a type prefix."""
    gist = record["gist"]
    return {
        f"{prefix}Title": gist.get("title"),
        f"{prefix}Description": gist.get("description"),
        f"{prefix}PrimaryCategory": extract_optional_title(gist.get("primaryCategory")),
        f"{prefix}Categories": flatten_categories(record.get("categories")),
        f"{prefix}Tags": flatten_tags(record.get("tags")),
    }


class ContentTransformer(ABC):
    """Builds the index document of one content type and applies it through a gateway.

    Subclasses set `content_type` and implement `to_document`. API-backed
    transformers fetch the record with their content client; image-backed
    ones decode it from the change event.
    """

    content_type: ClassVar[ContentType]
    source_mode: ClassVar[SourceMode] = SourceMode.API
    identity: ClassVar[Identity] = Identity.ANONYMOUS

    def __init__(self, gateway: IndexGateway, client: ContentClient | None = None):
        if self.source_mode is SourceMode.API and client is None:
            raise ValueError(f"{type(self).__name__} needs a content client")
        self.gateway = gateway
        self.client = client

    @abstractmethod
    def to_document(self, record: dict[str, Any]) -> dict[str, Any]:
        """Index document for one decoded content record."""

    async def load_record(
        self, site: str, content_id: str, image: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        if self.source_mode is SourceMode.EVENT_IMAGE:
            if image is None:
                raise DocumentBuildError(f"No image to index {self.content_type.value} {content_id} from")
            return decode_image(image)
        try:
            return await self.client.fetch_content(self.content_type, site, content_id)
        except ContentClientError as exc:
            raise DocumentBuildError(
                f"Could not fetch {self.content_type.value} {content_id} for {site}: {exc}"
            ) from exc

    async def build_document(
        self, site: str, content_id: str, image: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Index document for one content item."""
        record = await self.load_record(site, content_id, image)
        try:
            return self.to_document(record)
        except (KeyError, TypeError, AttributeError) as exc:
            raise DocumentBuildError(
                f"Malformed {self.content_type.value} record {content_id} for {site}: {exc!r}"
            ) from exc

    async def index(
        self,
        action: IndexAction,
        site: str,
        content_id: str,
        image: dict[str, Any] | None = None,
    ) -> bool:
        """Upsert or remove the document of one content item."""
        if action is IndexAction.UPSERT:
            document = await self.build_document(site, content_id, image)
            return await self.gateway.upsert(site, content_id, document)
        return await self.gateway.delete(site, content_id)
