"""Registry sources: the live registry over HTTP and the bundled fallback snapshot."""

from __future__ import annotations

from pathlib import Path

import httpx

from netresolver.config import Settings, get_settings
from netresolver.exceptions import RegistryLoadError
from netresolver.models.schema import Registry


def parse_registry(raw: bytes | str) -> Registry:
    return Registry.model_validate_json(raw)


def fetch_latest_registry(
    settings: Settings | None = None,
    transport: httpx.BaseTransport | None = None,
) -> Registry:
    """Download and parse the latest published registry.

    `transport` replaces httpx's network transport, e.g. an httpx.MockTransport.
    """
    settings = settings or get_settings()
    try:
        with httpx.Client(timeout=settings.fetch_timeout, follow_redirects=True, transport=transport) as client:
            resp = client.get(settings.registry_url)
            resp.raise_for_status()
    except httpx.HTTPError as e:
        raise RegistryLoadError("remote", f"{type(e).__name__}: {e}") from e
    return parse_registry(resp.content)


def read_embedded_registry(path: Path | None = None) -> Registry:
    """Parse the registry snapshot shipped with the package."""
    if path is None:
        path = get_settings().embedded_registry_path
    return parse_registry(path.read_bytes())
