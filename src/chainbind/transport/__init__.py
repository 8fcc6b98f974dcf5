"""
Transports for chainbind.

- Transport: abstract provider interface
- EventEmitterTransport: listener registry shared by transports
- Web3Transport: JSON-RPC transport over web3.py
- create_transport: build the default Web3Transport from configuration
"""

from chainbind.transport.base import EventEmitterTransport, Listener, Transport
from chainbind.transport.factory import create_transport
from chainbind.transport.types import BLOCK_EVENT, Receipt, TransactionResponse, to_hex
from chainbind.transport.web3_transport import Web3Transport

__all__ = [
    "BLOCK_EVENT",
    "Listener",
    "Transport",
    "EventEmitterTransport",
    "Web3Transport",
    "create_transport",
    "Receipt",
    "TransactionResponse",
    "to_hex",
]
