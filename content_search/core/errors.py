"""
Error taxonomy for the indexing pipeline.
Content API and search engine failures are translated into these at the module
that talks to the library; the event router turns any of them into a failed
item outcome instead of letting it fail the batch.
"""


class IndexingError(Exception):
    """Base class for every failure raised by the indexing pipeline."""


class MalformedEventError(IndexingError):
    """Change event carries neither a new nor an old image (or lacks its keys)."""


class UnsupportedTypeError(IndexingError):
    """Recognized table but unrecognized content subtype. Skipped, never counted as a failure."""


class DocumentBuildError(IndexingError):
    """A transformer could not produce an index document."""


class ContentClientError(IndexingError):
    """Base class for content API failures."""


class TokenError(ContentClientError):
    """Token endpoint unreachable, non-2xx, or returned no token."""


class ContentFetchError(ContentClientError):
    """Content endpoint unreachable or non-2xx."""


class ParseError(ContentClientError):
    """Response body is not valid JSON or lacks the expected shape."""


class IndexGatewayError(IndexingError):
    """Base class for search engine failures."""


class IndexCreateError(IndexGatewayError):
    pass


class IndexWriteError(IndexGatewayError):
    pass


class IndexDeleteError(IndexGatewayError):
    """Delete failed for a reason other than the document (or index) not existing."""


class BatchProcessingError(IndexingError):
    """One or more events of a batch failed."""

    def __init__(self, failed: int, total: int):
        self.failed = failed
        self.total = total
        super().__init__(f"There was an error processing {failed} events!")

    def __reduce__(self):
        return type(self), (self.failed, self.total)
