"""
Index gateway - idempotent document writes against the per-site index.
The index is created on first insert from the fixed content template; a
concurrent first insert that wins the creation race is not an error.
"""

import logging
from typing import Any

from elastic_transport import TransportError
from elasticsearch import ApiError, AsyncElasticsearch, BadRequestError, NotFoundError

from content_search.core.errors import IndexCreateError, IndexDeleteError, IndexWriteError

logger = logging.getLogger(__name__)

INDEX_EXISTS_ERROR = "resource_already_exists_exception"


def _error_type(exc: ApiError) -> str:
    """Elasticsearch error type, e.g. resource_already_exists_exception."""
    body = exc.body if isinstance(exc.body, dict) else {}
    error = body.get("error")
    if isinstance(error, dict) and error.get("type"):
        return error["type"]
    return str(getattr(exc, "message", exc))


class IndexGateway:
    """Upserts and deletes content documents; document id is the content id."""

    def __init__(self, es: AsyncElasticsearch, template: dict[str, Any]):
        self.es = es
        self.template = template

    def index_name(self, site: str) -> str:
        """One index per site."""
        return site

    async def create_index(self, name: str, template: dict[str, Any] | None = None) -> bool:
        """Create `name` from a settings+mappings template. False when it already existed."""
        template = template or self.template
        try:
            await self.es.indices.create(
                index=name,
                settings=template.get("settings"),
                mappings=template.get("mappings"),
            )
        except BadRequestError as exc:
            if _error_type(exc) == INDEX_EXISTS_ERROR:
                logger.info("Index %s was created concurrently", name)
                return False
            logger.warning("Error creating index %s: %s", name, exc)
            raise IndexCreateError(f"Could not create index {name}: {exc}") from exc
        except (ApiError, TransportError) as exc:
            logger.warning("Error creating index %s: %s", name, exc)
            raise IndexCreateError(f"Could not create index {name}: {exc}") from exc
        logger.info("Created index %s", name)
        return True

    async def ensure_index(self, name: str) -> bool:
        """Create the index if it does not exist yet. True when this call created it."""
        try:
            exists = await self.es.indices.exists(index=name)
        except (ApiError, TransportError) as exc:
            logger.warning("Error checking if index %s exists: %s", name, exc)
            raise IndexCreateError(f"Could not check index {name}: {exc}") from exc
        if exists:
            return False
        return await self.create_index(name)

    async def upsert(self, site: str, content_id: str, document: dict[str, Any]) -> bool:
        """Write or replace the document at (site index, content_id), visible immediately."""
        index = self.index_name(site)
        await self.ensure_index(index)
        try:
            await self.es.index(index=index, id=content_id, document=document, refresh=True)
        except (ApiError, TransportError) as exc:
            logger.warning("Error inserting document %s into %s: %s", content_id, index, exc)
            raise IndexWriteError(f"Could not write {content_id} to {index}: {exc}") from exc
        return True

    async def delete(self, site: str, content_id: str) -> bool:
        """Remove the document at (site index, content_id). A missing document is not an error."""
        index = self.index_name(site)
        try:
            await self.es.delete(index=index, id=content_id, refresh=True)
        except NotFoundError:
            # Removed before it was ever indexed
            logger.info("Document %s not found in %s, nothing to remove", content_id, index)
            return True
        except (ApiError, TransportError) as exc:
            logger.warning("Error removing document %s from %s: %s", content_id, index, exc)
            raise IndexDeleteError(f"Could not remove {content_id} from {index}: {exc}") from exc
        return True
