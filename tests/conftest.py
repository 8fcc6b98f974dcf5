"""
Shared fixtures and fakes for chainbind tests.
"""

import asyncio
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pytest

from chainbind.config import reset_config
from chainbind.signer import Signer
from chainbind.transport.base import EventEmitterTransport, Transport
from chainbind.transport.types import Receipt, TransactionResponse


# =============================================================================
# Test Constants
# =============================================================================

CONTRACT_ADDRESS = "0x1234567890123456789012345678901234567890"
SIGNER_ADDRESS = "0xabcdefABCDEFabcdefABCDEFabcdefABCDEFabcd"
TX_HASH = "0x" + "1" * 64
OTHER_TX_HASH = "0x" + "2" * 64

SIMPLE_STORAGE_ABI: List[Dict[str, Any]] = [
    {
        "inputs": [{"name": "initialValue", "type": "string"}],
        "stateMutability": "nonpayable",
        "type": "constructor",
    },
    {
        "inputs": [],
        "name": "getValue",
        "outputs": [{"name": "", "type": "string"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [{"name": "value", "type": "string"}],
        "name": "setValue",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "anonymous": False,
        "inputs": [
            {"indexed": True, "name": "author", "type": "address"},
            {"indexed": False, "name": "oldValue", "type": "string"},
            {"indexed": False, "name": "newValue", "type": "string"},
        ],
        "name": "ValueChanged",
        "type": "event",
    },
]


# =============================================================================
# Fakes
# =============================================================================


class FakeTransport(EventEmitterTransport):
    """In-memory transport: receipts are set by the test, events emitted by hand."""

    def __init__(self, values: Optional[Dict[str, Any]] = None) -> None:
        super().__init__()
        self.values = values or {}
        self.receipts: Dict[str, Receipt] = {}
        self.calls: List[Tuple[str, Tuple[Any, ...], Optional[str]]] = []
        self.receipt_queries: List[str] = []

    async def call(
        self,
        address: str,
        abi: Sequence[Dict[str, Any]],
        function_name: str,
        args: Sequence[Any],
        sender: Optional[str] = None,
    ) -> Any:
        self.calls.append((function_name, tuple(args), sender))
        return self.values.get(function_name)

    async def get_receipt(self, tx_hash: str) -> Optional[Receipt]:
        self.receipt_queries.append(tx_hash)
        return self.receipts.get(tx_hash)

    async def wait_for_inclusion(self, tx_hash: str, timeout: Optional[float] = None) -> Receipt:
        while tx_hash not in self.receipts:
            await asyncio.sleep(0.001)
        return self.receipts[tx_hash]

    def mine(self, tx_hash: str = TX_HASH, block_number: int = 1, confirmations: int = 1) -> Receipt:
        receipt = Receipt(
            transaction_hash=tx_hash,
            block_number=block_number,
            confirmations=confirmations,
            status=1,
        )
        self.receipts[tx_hash] = receipt
        return receipt


class FakeSigner(Signer):
    """Signer returning a fixed transaction hash without any network access."""

    def __init__(
        self,
        address: str = SIGNER_ADDRESS,
        transport: Optional[Transport] = None,
        *,
        tx_hash: str = TX_HASH,
        error: Optional[Exception] = None,
        sent: Optional[List[Tuple[str, str, Tuple[Any, ...]]]] = None,
    ) -> None:
        self._address = address
        self._transport = transport
        self.tx_hash = tx_hash
        self.error = error
        self.gate: Optional[asyncio.Event] = None
        self.sent = sent if sent is not None else []

    @property
    def address(self) -> str:
        return self._address

    @property
    def transport(self) -> Optional[Transport]:
        return self._transport

    def connect(self, transport: Transport) -> "FakeSigner":
        connected = FakeSigner(
            self._address,
            transport,
            tx_hash=self.tx_hash,
            error=self.error,
            sent=self.sent,
        )
        connected.gate = self.gate
        return connected

    async def send_transaction(
        self,
        address: str,
        abi: Sequence[Dict[str, Any]],
        function_name: str,
        args: Sequence[Any],
    ) -> TransactionResponse:
        self.sent.append((address, function_name, tuple(args)))
        if self.gate is not None:
            await self.gate.wait()
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return TransactionResponse(hash=self.tx_hash, nonce=len(self.sent) - 1, from_address=self._address, to=address)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _reset_config():
    reset_config()
    yield
    reset_config()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport(values={"getValue": "hello"})


@pytest.fixture
def signer() -> FakeSigner:
    return FakeSigner()


@pytest.fixture
def abi() -> List[Dict[str, Any]]:
    return [dict(entry) for entry in SIMPLE_STORAGE_ABI]
