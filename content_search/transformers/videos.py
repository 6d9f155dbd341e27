"""Video documents (content API, server identity) with title suggestions."""

from typing import Any

from content_search.content.client import ContentClient
from content_search.schemas.content import ContentType, Identity
from content_search.search.gateway import IndexGateway
from content_search.transformers.base import ContentTransformer, flatten_people, gist_fields


def title_suggestions(title: str | None, skip_words: list[str]) -> list[str] | None:
    """Suffix phrases of a title for prefix suggestions, followed by the full title.

    A phrase starts at every word after the first that is not a skip word:
    "Welcome to the Black Parade" with skip words to/the gives
    ["Black Parade", "Parade", "Welcome to the Black Parade"].
    Skip words are matched case-sensitively.
    """
    if not title:
        return None
    skip = set(skip_words)
    words = title.split(" ")
    suggestions = [
        " ".join(words[start:])
        for start in range(1, len(words))
        if words[start] and words[start] not in skip
    ]
    suggestions.append(title)
    return suggestions


class VideoTransformer(ContentTransformer):
    content_type = ContentType.VIDEO
    identity = Identity.SERVER

    def __init__(
        self,
        gateway: IndexGateway,
        client: ContentClient | None = None,
        skip_words: list[str] | None = None,
    ):
        super().__init__(gateway, client)
        self.skip_words = skip_words or []

    def to_document(self, video: dict[str, Any]) -> dict[str, Any]:
        gist = video["gist"]
        return {
            "type": self.content_type.value,
            **gist_fields("video", video),
            "videoPeople": flatten_people(video.get("creditBlocks")),
            "suggestTitle": title_suggestions(gist.get("title"), self.skip_words),
            "status": (video.get("contentDetails") or {}).get("status"),
            "isTrailer": gist.get("isTrailer") or False,
            "free": gist.get("free"),
            "year": gist.get("year"),
            "parentalRating": video.get("parentalRating"),
            "data": video,
        }
