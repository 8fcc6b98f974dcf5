"""Build the default transport from configuration."""

from __future__ import annotations

from typing import Optional

from web3 import AsyncHTTPProvider, AsyncWeb3

from chainbind.config import ChainbindConfig, get_config
from chainbind.transport.web3_transport import Web3Transport
from chainbind.utils.logging import get_logger

_logger = get_logger(__name__)


def create_transport(config: Optional[ChainbindConfig] = None) -> Web3Transport:
    """
    Create a Web3Transport for the configured JSON-RPC endpoint.

    Args:
        config: Configuration to use; the process-wide one if None.

    No request is sent until the transport is first used.
    """
    config = config or get_config()
    endpoint = config.provider.json_rpc.endpoint
    web3 = AsyncWeb3(AsyncHTTPProvider(endpoint))
    _logger.debug("Created JSON-RPC transport for %s", endpoint)
    return Web3Transport(
        web3,
        polling_interval_ms=config.provider.polling_interval_ms,
        endpoint=endpoint,
    )
