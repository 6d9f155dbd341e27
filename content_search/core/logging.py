"""Process-wide logging setup (stdlib logging, one call per entrypoint)."""

import logging

from content_search.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging() -> None:
    """Apply the configured level and format once; later calls are no-ops."""
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)
    # Elasticsearch transport logs every request at INFO
    logging.getLogger("elastic_transport").setLevel(logging.WARNING)
