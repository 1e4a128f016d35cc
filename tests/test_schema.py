"""Tests for registry document parsing and the network models."""

import pytest
from pydantic import ValidationError

from netresolver.config import get_settings
from netresolver.exceptions import UnknownServiceError
from netresolver.models.schema import BytesEncoding, Network, NetworkType, Registry, Services
from netresolver.registry.cache import RegistryCache
from netresolver.registry.loader import load_registry
from netresolver.registry.sources import parse_registry, read_embedded_registry


class TestNetworkParsing:
    """Network records parse from the registry's camelCase JSON."""

    def test_camel_case_fields(self):
        network = Network.model_validate({
            "id": "mainnet",
            "fullName": "Ethereum Mainnet",
            "shortName": "Ethereum",
            "aliases": ["eth"],
            "caip2Id": "eip155:1",
            "networkType": "mainnet",
            "services": {"substreams": ["mainnet.eth.streamingfast.io:443"], "tokenApi": ["https://t.example"]},
            "firehose": {
                "bytesEncoding": "0xhex",
                "firstStreamableBlock": {"id": "0xabc", "height": 7},
            },
        })
        assert network.full_name == "Ethereum Mainnet"
        assert network.caip2_id == "eip155:1"
        assert network.network_type is NetworkType.MAINNET
        assert network.services.token_api == ("https://t.example",)
        assert network.firehose.bytes_encoding is BytesEncoding.PREFIXED_HEX
        assert network.firehose.first_streamable_block.height == 7

    def test_unknown_keys_ignored(self):
        network = Network.model_validate({"id": "x", "indexerDocsUrls": [{"url": "https://docs"}]})
        assert network.id == "x"

    def test_missing_services_default_empty(self):
        network = Network(id="x")
        assert network.services.substreams == ()
        assert network.services.firehose == ()
        assert network.firehose is None

    def test_frozen(self):
        network = Network(id="x")
        with pytest.raises(ValidationError):
            network.id = "y"


class TestServicesEndpoints:
    def test_accepts_both_spellings(self):
        services = Services(token_api=("https://t.example",))
        assert services.endpoints("tokenApi") == ("https://t.example",)
        assert services.endpoints("token_api") == ("https://t.example",)

    def test_unknown_service(self):
        with pytest.raises(UnknownServiceError) as exc_info:
            Services().endpoints("graphql")
        assert isinstance(exc_info.value, KeyError)
        assert "graphql" in str(exc_info.value)


class TestEmbeddedRegistry:
    """The bundled fallback snapshot is a valid registry document."""

    LEGACY_KEYS = [
        "mainnet", "bnb", "polygon", "amoy", "arbitrum", "holesky", "sepolia", "optimism", "avalanche", "chapel",
        "injective-mainnet", "injective-testnet", "starknet-mainnet", "starknet-testnet", "solana-mainnet-beta",
        "mantra-testnet", "mantra-mainnet", "stellar-testnet", "stellar", "sei-mainnet",
    ]

    @pytest.mark.parametrize("key", LEGACY_KEYS)
    def test_legacy_keys_resolve_from_fallback(self, key, fake_source, fast_settings):
        cache = RegistryCache(fake_source(always_fail=True), settings=fast_settings)
        try:
            assert cache.snapshot().find(key) is not None
        finally:
            cache.close(timeout=2.0)

    def test_substreams_view(self):
        snapshot = load_registry(read_embedded_registry)
        substreams = snapshot.substreams()
        for key in ["mainnet", "optimism", "arbitrum", "polygon", "bnb", "avalanche"]:
            assert substreams.find(key) is not None
        for key in ["cronos", "aurora", "celo"]:
            assert snapshot.find(key) is not None
            assert substreams.find(key) is None

    def test_parses(self):
        registry = read_embedded_registry()
        assert isinstance(registry, Registry)
        assert registry.version == "0.7.6"
        assert get_settings().embedded_registry_file.endswith(f"{registry.version}.json")

    def test_contains_mainnet(self):
        ids = {network.id for network in read_embedded_registry().networks}
        assert {"mainnet", "optimism", "arbitrum-one", "moonbeam"} <= ids

    def test_ids_unique_and_non_empty(self):
        ids = [network.id for network in read_embedded_registry().networks]
        assert all(ids)
        assert len(ids) == len(set(ids))

    def test_parse_rejects_malformed(self):
        with pytest.raises(ValidationError):
            parse_registry(b"{not json")
