"""
Content API client - authoritative records by site + id.
Every read first resolves an access token for the site, then issues the
type-specific GET with that token attached. Nothing is retried here: a failed
read fails the one event that needed it.
"""

import logging
from typing import Any

import httpx

from content_search.core.errors import ContentFetchError, ParseError, TokenError
from content_search.schemas.content import ContentType, Identity

logger = logging.getLogger(__name__)

_TOKEN_PATHS = {
    Identity.ANONYMOUS: "/identity/anonymous-token",
    Identity.SERVER: "/identity/server-token",
}

# content type -> (resource path, name of the id query parameter)
_CONTENT_PATHS = {
    ContentType.VIDEO: ("/content/videos", "ids"),
    ContentType.ARTICLE: ("/content/article", "id"),
    ContentType.EVENT: ("/content/event", "id"),
    ContentType.AUDIO: ("/content/audio", "id"),
    ContentType.PHOTO: ("/content/photo", "id"),
}


class ContentClient:
    """Reads content records as one identity. Tokens are cached per site on the instance."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        base_url: str,
        identity: Identity = Identity.ANONYMOUS,
    ):
        self.http = http
        self.base_url = base_url.rstrip("/")
        self.identity = identity
        self._tokens: dict[str, str] = {}

    async def resolve_token(self, site: str) -> str:
        """Access token for `site` from the identity's token endpoint."""
        if not site:
            raise TokenError("Site not defined")
        cached = self._tokens.get(site)
        if cached:
            return cached
        url = self.base_url + _TOKEN_PATHS[self.identity]
        try:
            response = await self.http.get(url, params={"site": site})
        except httpx.HTTPError as exc:
            logger.warning("Internal error getting %s API token for %s: %s", self.identity.value, site, exc)
            raise TokenError(f"Token request for {site} failed: {exc}") from exc
        if response.is_error:
            logger.warning(
                "API returned a %d error status while getting token for %s", response.status_code, site
            )
            raise TokenError(f"Token endpoint returned {response.status_code} for {site}")
        try:
            token = response.json()["authorizationToken"]
        except (ValueError, KeyError, TypeError) as exc:
            raise ParseError(f"Could not parse auth token for {site}") from exc
        if not token:
            raise ParseError(f"Empty auth token for {site}")
        self._tokens[site] = token
        return token

    async def fetch_content(self, content_type: ContentType, site: str, content_id: str) -> dict[str, Any]:
        """Authoritative record of one content item. Video responses are unwrapped from records[0]."""
        try:
            path, id_param = _CONTENT_PATHS[content_type]
        except KeyError:
            raise ValueError(f"No content API resource for {content_type.value}") from None
        token = await self.resolve_token(site)
        try:
            response = await self.http.get(
                self.base_url + path,
                params={"site": site, id_param: content_id},
                headers={"Authorization": token},
            )
        except httpx.HTTPError as exc:
            logger.warning("Internal error getting data for %s %s: %s", content_type.value, content_id, exc)
            raise ContentFetchError(f"Request for {content_type.value} {content_id} failed: {exc}") from exc
        if response.is_error:
            logger.warning(
                "API returned a %d error status while getting data for %s %s",
                response.status_code,
                content_type.value,
                content_id,
            )
            raise ContentFetchError(
                f"Content API returned {response.status_code} for {content_type.value} {content_id}"
            )
        try:
            body = response.json()
            record = body["records"][0] if content_type is ContentType.VIDEO else body
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise ParseError(f"Could not parse {content_type.value} {content_id} from response") from exc
        if not isinstance(record, dict):
            raise ParseError(f"Unexpected {content_type.value} payload for {content_id}")
        return record
