"""Search source adapter abstraction."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ebsco_search.models import SearchRequest, SearchResultSet


class SearchSource(ABC):
    """Abstract base class for search data sources.

    Each source adapter translates a generic SearchRequest into the
    specific API's syntax and normalizes the response into a
    SearchResultSet. Recoverable vendor failures come back inside the
    result set so one outage does not abort a multi-source search.
    """

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Unique identifier for this source (e.g. 'ebsco_host')."""
        ...

    @property
    def max_per_page(self) -> int:
        """Largest page size the vendor accepts in one call."""
        return 100

    @abstractmethod
    async def search(self, request: SearchRequest) -> SearchResultSet:
        """Run one search and return a single page of results."""
        ...

    async def aclose(self) -> None:
        """Release transport resources owned by the source."""

    async def __aenter__(self) -> SearchSource:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
