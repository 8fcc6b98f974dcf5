"""
Stub web3 objects for transport and signer tests.
"""

from typing import Any, Dict
from unittest.mock import AsyncMock, MagicMock

import pytest

from chainbind.transport.web3_transport import Web3Transport


class StubEth:
    """
    Stand-in for AsyncWeb3.eth.

    block_number and chain_id are awaitable properties on AsyncWeb3, so
    they return a fresh coroutine on every access.
    """

    def __init__(self) -> None:
        self.block = 0
        self.chain = 1
        self.contract = MagicMock()
        self.get_transaction_receipt = AsyncMock()
        self.wait_for_transaction_receipt = AsyncMock()
        self.get_transaction_count = AsyncMock(return_value=0)
        self.send_raw_transaction = AsyncMock()

    @staticmethod
    async def _value(value: Any) -> Any:
        return value

    @property
    def block_number(self):
        return self._value(self.block)

    @property
    def chain_id(self):
        return self._value(self.chain)


class StubWeb3:
    def __init__(self) -> None:
        self.eth = StubEth()


def contract_function(stub: StubEth, name: str) -> MagicMock:
    """Return the mock invoked as ``contract.functions[name](*args)``."""
    function = MagicMock()
    functions: Dict[str, MagicMock] = {name: MagicMock(return_value=function)}
    stub.contract.return_value.functions.__getitem__.side_effect = functions.__getitem__
    return function


def raw_receipt(tx_hash: str, block_number: int, status: int = 1) -> Dict[str, Any]:
    return {
        "transactionHash": bytes.fromhex(tx_hash[2:]),
        "blockNumber": block_number,
        "status": status,
    }


@pytest.fixture
def stub_web3() -> StubWeb3:
    return StubWeb3()


@pytest.fixture
def web3_transport(stub_web3) -> Web3Transport:
    return Web3Transport(stub_web3, polling_interval_ms=50, endpoint="http://localhost:8545")
