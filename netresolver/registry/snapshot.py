"""Immutable network-id -> Network mapping plus the lookup queries over it."""

from __future__ import annotations

import warnings
from collections.abc import Iterator, Mapping
from types import MappingProxyType

from netresolver.models.schema import Network


def strip_0x(value: str) -> str:
    # Some chains report hashes with a 0x prefix, some without
    return value.removeprefix("0x").removeprefix("0X").lower()


class RegistrySnapshot(Mapping[str, Network]):
    """A complete, self-consistent view of the registry at one point in time.

    Built once by the loader and never mutated. Refreshes produce a new
    snapshot instead, so holding a reference gives consistent reads for as
    long as the caller keeps it.
    """

    def __init__(
        self,
        networks: Mapping[str, Network],
        version: str = "",
        origin: str = "",
    ):
        self._networks = MappingProxyType(dict(networks))
        self.version = version
        self.origin = origin

    def __getitem__(self, network_id: str) -> Network:
        return self._networks[network_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._networks)

    def __len__(self) -> int:
        return len(self._networks)

    def __repr__(self) -> str:
        return f"RegistrySnapshot(origin={self.origin!r}, version={self.version!r}, networks={len(self)})"

    def find(self, key: str) -> Network | None:
        """Resolve a network by id, then alias, full name or short name.

        Non-id matches are tried in ascending id order so an alias shared by
        several networks always resolves to the same one.
        """
        network = self._networks.get(key)
        if network is not None:
            return network
        for network_id in sorted(self._networks):
            network = self._networks[network_id]
            if key in network.aliases or key == network.full_name or key == network.short_name:
                return network
        return None

    def filter_by_service(self, service: str) -> RegistrySnapshot:
        """Sub-snapshot of networks advertising at least one endpoint for `service`."""
        filtered = {
            network_id: network
            for network_id, network in self._networks.items()
            if network.services.endpoints(service)
        }
        return RegistrySnapshot(filtered, version=self.version, origin=self.origin)

    def substreams(self) -> RegistrySnapshot:
        return self.filter_by_service("substreams")

    def firehose(self) -> RegistrySnapshot:
        return self.filter_by_service("firehose")

    def find_by_first_streamable_block(self, height: int, block_id: str) -> Network | None:
        wanted = strip_0x(block_id)
        for network in self._networks.values():
            if network.firehose is None or network.firehose.first_streamable_block is None:
                continue
            block = network.firehose.first_streamable_block
            if block.height == height and strip_0x(block.id) == wanted:
                return network
        return None

    def find_by_genesis_block(self, height: int, block_id: str) -> Network | None:
        """Deprecated: the registry renamed genesis block to first streamable block."""
        warnings.warn(
            "find_by_genesis_block is deprecated, use find_by_first_streamable_block",
            DeprecationWarning,
            stacklevel=2,
        )
        return self.find_by_first_streamable_block(height, block_id)

    def find_by_endpoint(self, service: str, endpoint: str) -> Network | None:
        for network in self._networks.values():
            if endpoint in network.services.endpoints(service):
                return network
        return None

    def find_by_substreams_endpoint(self, endpoint: str) -> Network | None:
        return self.find_by_endpoint("substreams", endpoint)
