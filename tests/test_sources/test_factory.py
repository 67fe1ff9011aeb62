"""Tests for the search source factory."""

from __future__ import annotations

from unittest.mock import AsyncMock

import httpx
import pytest

from ebsco_search.config import EbscoHostConfig
from ebsco_search.sources.ebsco_host import EbscoHostSource
from ebsco_search.sources.factory import create_source


def _config(name: str = "ebsco_host") -> EbscoHostConfig:
    return EbscoHostConfig(name=name, profile_id="p", profile_password="pw")


def test_creates_ebsco_host():
    client = AsyncMock(spec=httpx.AsyncClient)
    source = create_source(_config(), client=client)
    assert isinstance(source, EbscoHostSource)
    assert source.source_name == "ebsco_host"
    assert source.config.profile_id == "p"


def test_unknown_source():
    with pytest.raises(ValueError, match="Unknown search source"):
        create_source(_config("eds"))


@pytest.mark.asyncio
async def test_owned_client_closed():
    source = create_source(_config())
    async with source:
        pass
    assert source._client.is_closed
