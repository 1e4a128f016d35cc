"""Networks defined locally and merged into every registry load.

Overrides only fill gaps: a network already present upstream is never replaced.
"""

from netresolver.models.schema import (
    BytesEncoding,
    FirehoseInfo,
    FirstStreamableBlock,
    Network,
    NetworkType,
    Services,
)

# Dummy blockchain used for operator demonstrations
ACME_DUMMY_BLOCKCHAIN = Network(
    id="acme-dummy-blockchain",
    short_name="Acme",
    full_name="Acme Dummy Blockchain",
    aliases=("acme-dummy", "dummy-blockchain"),
    caip2_id="acme:dummy-blockchain",
    network_type=NetworkType.DEVNET,
    services=Services(
        firehose=("localhost:10015",),
        substreams=("localhost:10016",),
    ),
    firehose=FirehoseInfo(
        block_type="sf.acme.type.v1.Block",
        buf_url="https://buf.build/streamingfast/firehose-acme",
        bytes_encoding=BytesEncoding.HEX,
        first_streamable_block=FirstStreamableBlock(
            id="0x" + "0" * 64,
            height=0,
        ),
    ),
)

NETWORK_OVERRIDES: tuple[Network, ...] = (
    ACME_DUMMY_BLOCKCHAIN,
)
