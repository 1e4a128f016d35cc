"""Endpoint selection and per-network encoding helpers."""

from __future__ import annotations

from collections.abc import Iterable

from netresolver.models.schema import BytesEncoding, Network

DEFAULT_PREFERRED_MARKERS: tuple[str, ...] = ("streamingfast.io",)


def preferred_endpoint(
    network: Network | None,
    service: str,
    markers: Iterable[str] = DEFAULT_PREFERRED_MARKERS,
) -> str | None:
    """Pick the endpoint to connect to for `service`.

    An endpoint hosted by a preferred provider (matched by substring) wins even
    when it is not listed first. Otherwise the first advertised endpoint is
    returned, or None if the network has no endpoint for the service.
    """
    if network is None:
        return None
    endpoints = network.services.endpoints(service)
    if not endpoints:
        return None

    markers = tuple(markers)
    for endpoint in endpoints:
        if any(marker in endpoint for marker in markers):
            return endpoint
    return endpoints[0]


def bytes_encoding(network: Network | None) -> BytesEncoding:
    """Bytes encoding used by the network's blocks, hex when unknown."""
    if network is not None and network.firehose is not None:
        return network.firehose.bytes_encoding
    return BytesEncoding.HEX
