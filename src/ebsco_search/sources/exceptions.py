"""Exceptions for search source adapters."""


class SearchSourceError(Exception):
    """Base exception for all search source errors."""


class InvalidArgumentError(SearchSourceError, ValueError):
    """Caller passed a request the engine cannot express (bad sort, page size)."""


class RecoverableSearchError(SearchSourceError):
    """Failure that is reported inside a result set instead of being raised.

    ``kind`` is the value of the matching ``FailureKind`` member.
    """

    kind: str = ""


class SearchTimeoutError(RecoverableSearchError):
    """Request timed out."""

    kind = "timeout"


class SearchConfigurationError(RecoverableSearchError):
    """HTTP client could not issue the request as configured (bad URL or scheme)."""

    kind = "configuration"


class BadResponseError(RecoverableSearchError):
    """Malformed HTTP response or error status from the vendor."""

    kind = "bad_response"


class ResponseParseError(RecoverableSearchError):
    """Response body is not well-formed XML."""

    kind = "parse"
