"""Pydantic v2 models for The Graph Networks Registry document."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from netresolver.exceptions import UnknownServiceError


class _RegistryModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class NetworkType(str, Enum):
    MAINNET = "mainnet"
    TESTNET = "testnet"
    DEVNET = "devnet"
    BEACON = "beacon"


class BytesEncoding(str, Enum):
    HEX = "hex"
    PREFIXED_HEX = "0xhex"
    BASE58 = "base58"
    BASE64 = "base64"
    STRING = "string"


class Services(_RegistryModel):
    firehose: tuple[str, ...] = ()
    substreams: tuple[str, ...] = ()
    subgraphs: tuple[str, ...] = ()
    sps: tuple[str, ...] = ()
    token_api: tuple[str, ...] = ()

    def endpoints(self, service: str) -> tuple[str, ...]:
        """Endpoints for a service, accepting either "tokenApi" or "token_api" spellings."""
        for name, field in type(self).model_fields.items():
            if service in (name, field.alias):
                return getattr(self, name)
        raise UnknownServiceError(service)


class FirstStreamableBlock(_RegistryModel):
    id: str
    height: int = Field(ge=0)


class FirehoseInfo(_RegistryModel):
    block_type: str = ""
    buf_url: str = ""
    bytes_encoding: BytesEncoding = BytesEncoding.HEX
    evm_extended_model: bool | None = None
    first_streamable_block: FirstStreamableBlock | None = None


class ApiUrl(_RegistryModel):
    url: str
    kind: str = ""


class Network(_RegistryModel):
    id: str
    full_name: str = ""
    short_name: str = ""
    aliases: tuple[str, ...] = ()
    caip2_id: str = ""
    network_type: NetworkType = NetworkType.MAINNET
    services: Services = Field(default_factory=Services)
    firehose: FirehoseInfo | None = None

    # Auxiliary metadata, carried through untouched
    rpc_urls: tuple[str, ...] = ()
    explorer_urls: tuple[str, ...] = ()
    api_urls: tuple[ApiUrl, ...] = ()
    icon: dict | None = None
    docs_url: str | None = None
    native_token: str | None = None
    graph_node: dict | None = None
    relations: tuple[dict, ...] = ()
    issuance_rewards: bool | None = None


class Registry(_RegistryModel):
    """Top-level registry document: metadata plus the network list."""

    version: str = ""
    title: str = ""
    description: str = ""
    updated_at: str = ""
    networks: tuple[Network, ...] = ()
