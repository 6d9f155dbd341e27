"""Photo gallery documents."""

from typing import Any

from content_search.schemas.content import ContentType
from content_search.transformers.base import ContentTransformer, extract_optional_title, gist_fields


class PhotoTransformer(ContentTransformer):
    content_type = ContentType.PHOTO

    def to_document(self, photo: dict[str, Any]) -> dict[str, Any]:
        details = photo.get("contentDetails") or {}
        fields = gist_fields("photo", photo)
        return {
            "type": self.content_type.value,
            "photoTitle": fields["photoTitle"],
            "photoDescription": fields["photoDescription"],
            "photoAuthor": extract_optional_title(details.get("author"), "name"),
            "photoPrimaryCategory": fields["photoPrimaryCategory"],
            "photoCategories": fields["photoCategories"],
            "photoTags": fields["photoTags"],
            "publishedDate": photo["gist"].get("publishedDate"),
            "data": photo,
        }
