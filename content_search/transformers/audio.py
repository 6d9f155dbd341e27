"""Audio documents. Streaming locations never reach the index."""

from typing import Any

from content_search.schemas.content import ContentType
from content_search.transformers.base import ContentTransformer, extract_optional_title, gist_fields

STRIPPED_FIELDS = frozenset({"streamingInfo"})


class AudioTransformer(ContentTransformer):
    content_type = ContentType.AUDIO

    def to_document(self, audio: dict[str, Any]) -> dict[str, Any]:
        data = {key: value for key, value in audio.items() if key not in STRIPPED_FIELDS}
        details = audio.get("contentDetails") or {}
        fields = gist_fields("audio", audio)
        return {
            "type": self.content_type.value,
            "audioTitle": fields["audioTitle"],
            "audioDescription": fields["audioDescription"],
            "audioAuthor": extract_optional_title(details.get("author"), "name"),
            "audioPrimaryCategory": fields["audioPrimaryCategory"],
            "audioCategories": fields["audioCategories"],
            "audioTags": fields["audioTags"],
            "data": data,
        }
