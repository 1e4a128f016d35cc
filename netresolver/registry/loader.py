"""Build a RegistrySnapshot from a registry source plus local overrides."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence

from netresolver.exceptions import RegistryLoadError
from netresolver.models.schema import Network, Registry
from netresolver.registry.overrides import NETWORK_OVERRIDES
from netresolver.registry.snapshot import RegistrySnapshot

logger = logging.getLogger(__name__)

# A source returns the whole registry document or just its network list
RegistrySource = Callable[[], "Registry | Sequence[Network]"]


def add_network(networks: dict[str, Network], network: Network | None, forced: bool = False) -> None:
    """Insert `network` unless its id is empty or, when not forced, already taken."""
    if network is None or not network.id:
        return
    if network.id in networks and not forced:
        return
    networks[network.id] = network


def load_registry(
    source: RegistrySource,
    overrides: Iterable[Network] = NETWORK_OVERRIDES,
    origin: str = "",
) -> RegistrySnapshot:
    """Run `source` and index its networks by id, then merge `overrides`.

    Raises RegistryLoadError if the source fails or returns something other
    than networks. Override merging cannot fail.
    """
    version = ""
    networks: dict[str, Network] = {}
    try:
        loaded = source()
        if isinstance(loaded, Registry):
            version = loaded.version
            loaded = loaded.networks

        for network in loaded:
            if not isinstance(network, Network):
                raise TypeError(f"expected Network, got {type(network).__name__}")
            add_network(networks, network, forced=True)
    except RegistryLoadError:
        raise
    except Exception as e:
        raise RegistryLoadError(origin or "registry", str(e)) from e

    for network in overrides:
        add_network(networks, network)

    logger.debug(f"Loaded {len(networks)} networks from {origin or 'registry'} (version={version or 'unknown'})")
    return RegistrySnapshot(networks, version=version, origin=origin)
