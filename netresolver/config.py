"""Centralized configuration via pydantic-settings. Overridable from NETRESOLVER_* env vars."""

from pathlib import Path
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


PACKAGE_ROOT = Path(__file__).resolve().parent

EMBEDDED_REGISTRY_VERSION = "0.7.6"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="NETRESOLVER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Remote registry
    registry_url: str = "https://networks-registry.thegraph.com/TheGraphNetworksRegistry.json"
    fetch_timeout: float = Field(default=10.0, gt=0)

    # Background repair backoff (seconds)
    repair_initial_delay: float = Field(default=0.5, gt=0)
    repair_max_delay: float = Field(default=60.0, gt=0)

    # Endpoint selection
    preferred_endpoint_markers: list[str] = Field(default_factory=lambda: ["streamingfast.io"])

    embedded_registry_file: str = f"fallback_TheGraphNetworksRegistry_{EMBEDDED_REGISTRY_VERSION}.json"

    @property
    def embedded_registry_path(self) -> Path:
        return PACKAGE_ROOT / "registry" / "data" / self.embedded_registry_file


@lru_cache
def get_settings() -> Settings:
    return Settings()
