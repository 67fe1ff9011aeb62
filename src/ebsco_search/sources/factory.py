"""Search source factory."""

from __future__ import annotations

import httpx

from ebsco_search.config import EbscoHostConfig
from ebsco_search.sources.base import SearchSource


def create_source(
    config: EbscoHostConfig,
    client: httpx.AsyncClient | None = None,
) -> SearchSource:
    """Create a search source adapter from configuration."""
    match config.name:
        case "ebsco_host":
            from ebsco_search.sources.ebsco_host import EbscoHostSource

            return EbscoHostSource(config, client=client)
        case _:
            raise ValueError(f"Unknown search source: {config.name}")
