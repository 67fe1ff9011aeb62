"""Core data models for the EBSCO search adapter.

All Pydantic models are defined here as the single source of truth.
Every other module imports from this file.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ebsco_search.sources.exceptions import RecoverableSearchError, SearchSourceError


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class SortKey(str, Enum):
    RELEVANCE = "relevance"
    DATE_DESC = "date_desc"


class ItemFormat(str, Enum):
    BOOK = "Book"
    ARTICLE = "Article"
    DISSERTATION = "Dissertation"
    SERIAL = "Serial"
    UNKNOWN = "Unknown"


class FailureKind(str, Enum):
    """Closed set of failures that degrade a search instead of raising."""

    TIMEOUT = "timeout"
    CONFIGURATION = "configuration"
    BAD_RESPONSE = "bad_response"
    PARSE = "parse"


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------

class SearchRequest(BaseModel):
    query: str
    start: int | None = Field(default=None, ge=0)
    per_page: int | None = Field(default=None, ge=1)
    # Checked against the engine's sort definitions when the URL is built.
    sort: str | None = None


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

class Author(BaseModel):
    display: str


class ResultItem(BaseModel):
    link: str | None = None
    issn: str | None = None
    journal_title: str | None = None
    publisher: str | None = None
    isbn: str | None = None
    year: str | None = None
    volume: str | None = None
    issue: str | None = None
    title: str | None = None
    start_page: str | None = None
    doi: str | None = None
    abstract: str | None = None
    authors: list[Author] = Field(default_factory=list)
    format: ItemFormat = ItemFormat.UNKNOWN
    format_str: str = ""
    source: str = "ebsco_host"


def _failure_kind(error: SearchSourceError | None) -> FailureKind | None:
    if isinstance(error, RecoverableSearchError):
        return FailureKind(error.kind)
    return None


class SearchResultSet(BaseModel):
    """One page of results plus the vendor-reported total.

    A failed search carries no items and the recoverable error that
    caused it; ``total_items`` may exceed ``len(items)`` on success.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    items: list[ResultItem] = Field(default_factory=list)
    total_items: int = 0
    error: SearchSourceError | None = Field(default=None, exclude=True)

    @classmethod
    def from_error(cls, error: SearchSourceError) -> SearchResultSet:
        return cls(items=[], total_items=0, error=error)

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def failure(self) -> FailureKind | None:
        return _failure_kind(self.error)


class DatabaseInfo(BaseModel):
    short_name: str
    long_name: str | None = None


class InfoResult(BaseModel):
    """Parsed response of the vendor Info call."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    databases: list[DatabaseInfo] = Field(default_factory=list)
    # Namespace-stripped root element of the Info document.
    document: Any = Field(default=None, exclude=True)
    error: SearchSourceError | None = Field(default=None, exclude=True)

    @classmethod
    def from_error(cls, error: SearchSourceError) -> InfoResult:
        return cls(error=error)

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def failure(self) -> FailureKind | None:
        return _failure_kind(self.error)
