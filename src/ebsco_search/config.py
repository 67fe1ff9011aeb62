"""Configuration loading for ebsco-search."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

DEFAULT_BASE_URL = "http://eit.ebscohost.com/Services/SearchService.asmx"


class EbscoHostConfig(BaseModel):
    """Per-account settings for the EBSCOhost EIT web service.

    Loaded once and never mutated; the engine holds it for its lifetime.
    An empty ``databases`` list is accepted here, the vendor rejects it.
    """

    model_config = ConfigDict(frozen=True)

    name: str = "ebsco_host"
    base_url: str = DEFAULT_BASE_URL
    profile_id: str
    profile_password: str
    databases: list[str] = []
    timeout_s: float = 20.0

    @field_validator("profile_id", "profile_password")
    @classmethod
    def _require_credentials(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must be non-empty")
        return value

    @field_validator("base_url")
    @classmethod
    def _trim_base_url(cls, value: str) -> str:
        return value.rstrip("/")


class AppConfig(BaseModel):
    sources: dict[str, EbscoHostConfig] = {}
    default_per_page: int = 10
    log_level: str = "WARNING"


def _env_list(name: str) -> list[str]:
    raw = os.getenv(name, "")
    return [part.strip() for part in raw.split(",") if part.strip()]


def load_config(env_path: str | Path | None = None) -> AppConfig:
    """Load configuration from environment variables (.env file)."""
    if env_path:
        load_dotenv(env_path)
    else:
        load_dotenv()

    sources: dict[str, EbscoHostConfig] = {}
    profile_id = os.getenv("EBSCO_PROFILE_ID", "")
    if profile_id:
        sources["ebsco_host"] = EbscoHostConfig(
            base_url=os.getenv("EBSCO_BASE_URL") or DEFAULT_BASE_URL,
            profile_id=profile_id,
            profile_password=os.getenv("EBSCO_PROFILE_PASSWORD", ""),
            databases=_env_list("EBSCO_DATABASES"),
            timeout_s=float(os.getenv("EBSCO_TIMEOUT_S", "20.0")),
        )

    return AppConfig(
        sources=sources,
        default_per_page=int(os.getenv("DEFAULT_PER_PAGE", "10")),
        log_level=os.getenv("LOG_LEVEL", "WARNING").upper(),
    )
