"""Content type vocabulary shared by the router, transformers and the suggestion layer."""

from enum import Enum


class ContentType(str, Enum):
    """Value of the `type` discriminator stored on every index document."""

    VIDEO = "video"
    SERIES = "series"
    ARTICLE = "article"
    EVENT = "event"
    AUDIO = "audio"
    PHOTO = "photo"


class SourceMode(str, Enum):
    """Where a transformer reads its content record from."""

    API = "api"
    EVENT_IMAGE = "event_image"


class Identity(str, Enum):
    """Content API identity: anonymous for public reads, server for privileged ones."""

    ANONYMOUS = "anonymous"
    SERVER = "server"
