"""
Records exchanged with a transport.

- TransactionResponse: what a signer returns once a write is broadcast
- Receipt: a finalized transaction inclusion record
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

__all__ = ["BLOCK_EVENT", "TransactionResponse", "Receipt", "to_hex"]

# Listener key for "a new block was observed".
BLOCK_EVENT = "block"


def to_hex(value: Any) -> str:
    """Render bytes (HexBytes included) as a 0x-prefixed hex string."""
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    text = str(value)
    return text if text.startswith("0x") else "0x" + text


@dataclass(frozen=True)
class TransactionResponse:
    """
    A broadcast (not yet included) transaction.

    Attributes:
        hash: Transaction hash, 0x-prefixed
        nonce: Sender nonce used for the transaction
        from_address: Sender address
        to: Contract address
    """

    hash: str
    nonce: int
    from_address: Optional[str] = None
    to: Optional[str] = None


@dataclass(frozen=True)
class Receipt:
    """
    A transaction inclusion record.

    Attributes:
        transaction_hash: Transaction hash, 0x-prefixed
        block_number: Block the transaction was included in
        confirmations: Blocks on top of (and including) the inclusion block
        status: 1 for success, 0 for revert, None when unknown
    """

    transaction_hash: str
    block_number: int
    confirmations: int
    status: Optional[int] = None

    @property
    def succeeded(self) -> bool:
        return self.status == 1

    @classmethod
    def from_web3(cls, raw: Mapping[str, Any], latest_block: int) -> "Receipt":
        """Build from a web3 receipt AttributeDict and the current block number."""
        block_number = int(raw["blockNumber"])
        return cls(
            transaction_hash=to_hex(raw["transactionHash"]),
            block_number=block_number,
            confirmations=max(latest_block - block_number + 1, 1),
            status=raw.get("status"),
        )
