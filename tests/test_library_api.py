"""Tests for library public API."""

from __future__ import annotations

import inspect
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

import ebsco_search
from ebsco_search.config import AppConfig, EbscoHostConfig
from ebsco_search.sources import factory

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _config() -> AppConfig:
    return AppConfig(
        sources={
            "ebsco_host": EbscoHostConfig(
                profile_id="p", profile_password="pw", databases=["a9h"]
            )
        },
        default_per_page=5,
    )


class TestPublicAPI:
    def test_all_exports_importable(self):
        for name in ebsco_search.__all__:
            obj = getattr(ebsco_search, name, None)
            assert obj is not None, f"{name} not importable from ebsco_search"

    def test_search_is_async(self):
        assert inspect.iscoroutinefunction(ebsco_search.search)
        assert inspect.iscoroutinefunction(ebsco_search.fetch_info)

    def test_export_functions_importable(self):
        from ebsco_search import export_bibtex, export_json, export_markdown
        assert callable(export_json)
        assert callable(export_bibtex)
        assert callable(export_markdown)


class TestSearchFunction:
    @pytest.mark.asyncio
    async def test_uses_default_per_page(self, monkeypatch):
        response = MagicMock(spec=httpx.Response)
        response.status_code = 200
        response.content = (FIXTURES_DIR / "ebsco_search_response.xml").read_bytes()
        client = AsyncMock(spec=httpx.AsyncClient)
        client.get = AsyncMock(return_value=response)

        original = factory.create_source
        monkeypatch.setattr(
            factory, "create_source", lambda cfg: original(cfg, client=client)
        )

        results = await ebsco_search.search("library", config=_config())

        assert results.total_items == 1472
        assert len(results.items) == 3
        url = client.get.call_args.args[0]
        assert "&numrec=5&" in url
        assert url.endswith("&db=a9h")

    @pytest.mark.asyncio
    async def test_not_configured(self):
        with pytest.raises(ValueError, match="EBSCO_PROFILE_ID"):
            await ebsco_search.search("x", config=AppConfig())
