"""
Change event schema - one row-level mutation delivered by the change stream.
Stream records wrap every scalar ({"S": "acme"}); keys, discriminators and
legacy images are read through the same decoder.
"""

import base64
import re
from decimal import InvalidOperation
from enum import Enum
from typing import Any

from boto3.dynamodb.types import Binary, TypeDeserializer
from pydantic import BaseModel, Field, ValidationError

from content_search.core.errors import MalformedEventError

# arn:aws:dynamodb:<region>:<account>:table/<TABLE>/stream/<timestamp>
_ARN_PREFIX = re.compile(r"^arn:aws:dynamodb:.*?:.*?:table/")
_STREAM_SUFFIX = re.compile(r"/stream.*$")

_WRAPPED_TYPES = frozenset({"S", "N", "B", "SS", "NS", "BS", "NULL", "BOOL", "M", "L"})
_deserializer = TypeDeserializer()


class EventAction(str, Enum):
    INSERT = "INSERT"
    MODIFY = "MODIFY"
    REMOVE = "REMOVE"


class IndexAction(str, Enum):
    """What the event means for the index: MODIFY is handled like INSERT."""

    UPSERT = "upsert"
    REMOVE = "remove"


def parse_source_table(origin: str) -> str:
    """Logical table name from a stream ARN, e.g. RELEASE.CONTENT.SERIES -> CONTENT.SERIES."""
    table = _STREAM_SUFFIX.sub("", _ARN_PREFIX.sub("", origin or ""))
    parts = table.split(".")
    # Drop the stage segment of <STAGE>.CONTENT.<NAME>
    if len(parts) > 2:
        parts = parts[1:]
    return ".".join(parts)


def _plain(value: Any) -> Any:
    """Sets become sorted lists and binaries base64 strings, so the value serializes as JSON."""
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain(item) for item in value]
    if isinstance(value, (set, frozenset)):
        items = [_plain(item) for item in value]
        try:
            return sorted(items)
        except TypeError:
            return items
    if isinstance(value, (Binary, bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    return value


def unwrap(value: Any) -> Any:
    """Decode a wrapped scalar ({"S": "x"} -> "x"); plain values pass through.

    Raises MalformedEventError for a wrapped value that cannot be decoded.
    """
    if isinstance(value, dict) and len(value) == 1 and next(iter(value)) in _WRAPPED_TYPES:
        try:
            return _plain(_deserializer.deserialize(value))
        except (TypeError, AttributeError, ValueError, InvalidOperation) as exc:
            raise MalformedEventError(f"Undecodable attribute value {value!r}: {exc!r}") from exc
    return value


def decode_image(image: dict[str, Any]) -> dict[str, Any]:
    """Decode a whole record image into plain JSON-like data."""
    return {key: unwrap(value) for key, value in image.items()}


class ChangeEvent(BaseModel):
    """One mutation notification, consumed once by the event router."""

    source_table: str
    event_name: str
    site: str | None = None
    content_id: str | None = None
    new_image: dict[str, Any] | None = None
    old_image: dict[str, Any] | None = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "ChangeEvent":
        """Build from a raw stream record. Raises MalformedEventError if it cannot be read."""
        try:
            stream = record.get("dynamodb") or {}
            keys = stream.get("Keys") or {}
            return cls(
                source_table=parse_source_table(record.get("eventSourceARN", "")),
                event_name=record.get("eventName", ""),
                site=unwrap(keys.get("site")),
                content_id=unwrap(keys.get("id")),
                new_image=stream.get("NewImage"),
                old_image=stream.get("OldImage"),
            )
        except (AttributeError, TypeError, ValidationError) as exc:
            raise MalformedEventError(f"Unreadable change event: {exc}") from exc

    @property
    def action(self) -> IndexAction:
        if self.event_name in (EventAction.INSERT.value, EventAction.MODIFY.value):
            return IndexAction.UPSERT
        return IndexAction.REMOVE

    @property
    def image(self) -> dict[str, Any] | None:
        """NewImage for INSERT/MODIFY, OldImage for REMOVE."""
        return self.new_image if self.new_image is not None else self.old_image

    def field(self, name: str) -> Any:
        """Plain value of one attribute of the active image (None when absent)."""
        image = self.image or {}
        return unwrap(image.get(name))

    def has_field(self, name: str) -> bool:
        return name in (self.image or {})

    def validate_keys(self) -> None:
        """Raise MalformedEventError unless the event has its keys and at least one image."""
        if self.image is None:
            raise MalformedEventError(
                f"Event for {self.site}/{self.content_id} has neither a new nor an old image"
            )
        if not self.site or not self.content_id:
            raise MalformedEventError(f"Event from {self.source_table} is missing its site/id keys")


class ChangeBatch(BaseModel):
    """Batch of raw stream records as delivered by the change source."""

    records: list[dict[str, Any]] = Field(alias="Records")


class BatchAccepted(BaseModel):
    """Change batch handed to the indexing queue."""

    task_id: str
    records: int
