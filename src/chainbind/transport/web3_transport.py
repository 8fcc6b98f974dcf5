"""
JSON-RPC transport backed by web3.py.

Web3Transport performs read calls and receipt lookups through an
AsyncWeb3 instance. While at least one listener is registered it polls
the node for new blocks and emits:

- BLOCK_EVENT with the block number, once per new block
- <tx hash> with the Receipt, once, as soon as the transaction is included
"""

from __future__ import annotations

import asyncio
import re
import traceback
from typing import Any, Dict, Optional, Sequence, Set

from web3 import AsyncWeb3, Web3
from web3.exceptions import TimeExhausted, TransactionNotFound

from chainbind.config import DEFAULT_POLLING_INTERVAL_MS
from chainbind.errors import InclusionTimeoutError
from chainbind.transport.base import EventEmitterTransport
from chainbind.transport.types import BLOCK_EVENT, Receipt
from chainbind.utils.logging import get_logger

_logger = get_logger(__name__)

TX_HASH_PATTERN = re.compile(r"^0x[0-9a-fA-F]{64}$")
DEFAULT_INCLUSION_TIMEOUT_S = 120.0


class Web3Transport(EventEmitterTransport):
    """
    Transport over an AsyncWeb3 provider.

    Example:
        ```python
        from web3 import AsyncWeb3, AsyncHTTPProvider

        transport = Web3Transport(
            AsyncWeb3(AsyncHTTPProvider("http://localhost:8545")),
            polling_interval_ms=50,
        )
        balance = await transport.call(token, abi, "balanceOf", [owner])
        ```
    """

    def __init__(
        self,
        web3: AsyncWeb3,
        *,
        polling_interval_ms: int = DEFAULT_POLLING_INTERVAL_MS,
        endpoint: Optional[str] = None,
    ) -> None:
        super().__init__()
        self.web3 = web3
        self.polling_interval_ms = polling_interval_ms
        self.endpoint = endpoint
        self._poll_task: Optional[asyncio.Task[None]] = None
        self._round_task: Optional[asyncio.Task[None]] = None
        self._last_block: Optional[int] = None
        self._emitted_hashes: Set[str] = set()

    def __repr__(self) -> str:
        return f"Web3Transport(endpoint={self.endpoint!r}, polling_interval_ms={self.polling_interval_ms})"

    @property
    def is_polling(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    # ------------------------------------------------------------------
    # Ledger queries
    # ------------------------------------------------------------------

    async def call(
        self,
        address: str,
        abi: Sequence[Dict[str, Any]],
        function_name: str,
        args: Sequence[Any],
        sender: Optional[str] = None,
    ) -> Any:
        contract = self.web3.eth.contract(
            address=Web3.to_checksum_address(address),
            abi=list(abi),
        )
        tx_params: Dict[str, Any] = {}
        if sender is not None:
            tx_params["from"] = Web3.to_checksum_address(sender)
        return await contract.functions[function_name](*args).call(tx_params or None)

    async def get_receipt(self, tx_hash: str) -> Optional[Receipt]:
        try:
            raw = await self.web3.eth.get_transaction_receipt(tx_hash)
        except TransactionNotFound:
            return None
        if raw is None or raw.get("blockNumber") is None:
            return None
        latest = await self.web3.eth.block_number
        return Receipt.from_web3(raw, latest)

    async def wait_for_inclusion(
        self,
        tx_hash: str,
        timeout: Optional[float] = None,
    ) -> Receipt:
        """
        Wait until tx_hash is included.

        Raises:
            InclusionTimeoutError: If the transaction is not included in time.
        """
        timeout = DEFAULT_INCLUSION_TIMEOUT_S if timeout is None else timeout
        try:
            raw = await self.web3.eth.wait_for_transaction_receipt(
                tx_hash,
                timeout=timeout,
                poll_latency=self.polling_interval_ms / 1000,
            )
        except TimeExhausted as e:
            raise InclusionTimeoutError(tx_hash, timeout) from e
        latest = await self.web3.eth.block_number
        return Receipt.from_web3(raw, latest)

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    def _listeners_changed(self) -> None:
        if self.listener_count() > 0:
            self._start_polling()
        else:
            self._stop_polling()

        # Hashes with no listener left may be emitted again if re-registered.
        self._emitted_hashes.intersection_update(self.keys())

    def _start_polling(self) -> None:
        if self.is_polling:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            _logger.debug("No running event loop; block polling not started")
            return
        self._last_block = None
        self._poll_task = loop.create_task(self._poll_loop())

    def _stop_polling(self) -> None:
        task, self._poll_task = self._poll_task, None
        if task is None or task.done():
            return
        # A task inside a round may be running a listener callback. It is
        # left to finish the round and exits on its own.
        if task is not self._round_task:
            task.cancel()

    async def _poll_loop(self) -> None:
        task = asyncio.current_task()
        _logger.debug("Starting block poll loop", extra={"endpoint": self.endpoint})
        while self._poll_task is task and self.listener_count() > 0:
            self._round_task = task
            try:
                await self.poll_once()
            except Exception as e:
                _logger.error(
                    "Error in block poll loop",
                    extra={
                        "endpoint": self.endpoint,
                        "error": str(e),
                        "traceback": traceback.format_exc(),
                    },
                )
            finally:
                if self._round_task is task:
                    self._round_task = None
            if self._poll_task is not task:
                break
            await asyncio.sleep(self.polling_interval_ms / 1000)
        _logger.debug("Block poll loop ended", extra={"endpoint": self.endpoint})

    async def poll_once(self) -> None:
        """
        Run one polling round.

        The first round only records the current block; later rounds emit
        BLOCK_EVENT for every block observed since. Pending transaction
        hashes are checked on every round.
        """
        latest = await self.web3.eth.block_number

        if self._last_block is None:
            self._last_block = latest
        else:
            for block_number in range(self._last_block + 1, latest + 1):
                await self.emit(BLOCK_EVENT, block_number)
            self._last_block = max(self._last_block, latest)

        for key in self.keys():
            if key in self._emitted_hashes or not TX_HASH_PATTERN.match(key):
                continue
            receipt = await self.get_receipt(key)
            # Listeners may have been removed while the receipt was fetched.
            if receipt is None or self.listener_count(key) == 0:
                continue
            self._emitted_hashes.add(key)
            await self.emit(key, receipt)
