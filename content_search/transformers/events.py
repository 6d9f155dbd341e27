"""Event documents; venue, time and date come from the first schedule entry."""

from typing import Any

from content_search.schemas.content import ContentType
from content_search.transformers.base import ContentTransformer, gist_fields


class EventTransformer(ContentTransformer):
    content_type = ContentType.EVENT

    def to_document(self, event: dict[str, Any]) -> dict[str, Any]:
        schedule = event["gist"].get("eventSchedule") or []
        first = schedule[0] if schedule else {}
        return {
            "type": self.content_type.value,
            **gist_fields("event", event),
            "eventVenue": first.get("venue"),
            "eventTime": first.get("eventTime"),
            "eventDate": first.get("eventDate"),
            "data": event,
        }
