"""Article documents (content API, anonymous identity)."""

from typing import Any

from content_search.schemas.content import ContentType
from content_search.transformers.base import ContentTransformer, extract_optional_title, gist_fields


class ArticleTransformer(ContentTransformer):
    content_type = ContentType.ARTICLE

    def to_document(self, article: dict[str, Any]) -> dict[str, Any]:
        details = article.get("contentDetails") or {}
        fields = gist_fields("article", article)
        return {
            "type": self.content_type.value,
            "articleTitle": fields["articleTitle"],
            "articleDescription": fields["articleDescription"],
            "articleAuthor": extract_optional_title(details.get("author"), "name"),
            "articlePrimaryCategory": fields["articlePrimaryCategory"],
            "articleCategories": fields["articleCategories"],
            "articleTags": fields["articleTags"],
            "data": article,
        }
