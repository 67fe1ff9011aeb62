"""ebsco-search: EBSCOhost EIT search adapter for multi-source search."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ebsco_search.export import export_bibtex, export_json, export_markdown
from ebsco_search.models import (
    Author,
    FailureKind,
    InfoResult,
    ItemFormat,
    ResultItem,
    SearchRequest,
    SearchResultSet,
    SortKey,
)

if TYPE_CHECKING:
    from ebsco_search.config import AppConfig, EbscoHostConfig


def _engine_config(cfg: AppConfig) -> EbscoHostConfig:
    try:
        return cfg.sources["ebsco_host"]
    except KeyError:
        raise ValueError("EBSCOhost is not configured; set EBSCO_PROFILE_ID") from None


async def search(
    query: str,
    config: AppConfig | None = None,
    start: int | None = None,
    per_page: int | None = None,
    sort: str | None = None,
) -> SearchResultSet:
    """One-line convenience: run a single EBSCOhost search.

    Args:
        query: Free-text query.
        config: Optional AppConfig. If None, loads from environment.
        start: 0-based offset of the first result.
        per_page: Page size, at most 200.
        sort: "relevance" (default) or "date_desc".
    """
    from ebsco_search.config import load_config
    from ebsco_search.sources.factory import create_source

    cfg = config or load_config()
    request = SearchRequest(
        query=query,
        start=start,
        per_page=per_page if per_page is not None else cfg.default_per_page,
        sort=sort,
    )

    async with create_source(_engine_config(cfg)) as source:
        return await source.search(request)


async def fetch_info(config: AppConfig | None = None) -> InfoResult:
    """Ask EBSCOhost which databases the configured profile may search."""
    from ebsco_search.config import load_config
    from ebsco_search.sources.ebsco_host import EbscoHostSource

    async with EbscoHostSource(_engine_config(config or load_config())) as source:
        return await source.fetch_info()


__all__ = [
    "Author",
    "FailureKind",
    "InfoResult",
    "ItemFormat",
    "ResultItem",
    "SearchRequest",
    "SearchResultSet",
    "SortKey",
    "search",
    "fetch_info",
    "export_json",
    "export_bibtex",
    "export_markdown",
]
