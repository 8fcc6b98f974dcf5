"""
Transaction subscriptions.

A write function returns a TransactionSubscription right away, before
its transaction is even broadcast. Callers observe the outcome by
registering callbacks:

    subscription = contract.setValue("hello")
    await subscription.on("failed", on_error)
    await subscription.on("confirmation", on_confirmation)

States:
- PENDING: the transaction has not been broadcast yet
- IDLE: the transaction hash is known, no confirmation listener
- LISTENING: exactly one confirmation listener is attached
- TERMINATED: the listener was removed (manually or by timeout)

A subscription holds at most one confirmation listener and at most one
"failed" handler. The confirmation listener is retired after timeout_ms.
Errors raised while delivering confirmations (callback failures,
timeouts) only reach the "failed" handler; without one they are logged
and dropped.
"""

from __future__ import annotations

import asyncio
import inspect
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional, Set, Union

from chainbind.config import get_config
from chainbind.errors import (
    AlreadyListeningError,
    CallbackFailureError,
    InvalidArgumentError,
    SubscriptionTimeoutError,
)
from chainbind.transport.base import Listener, Transport
from chainbind.transport.types import BLOCK_EVENT, Receipt, TransactionResponse
from chainbind.utils.logging import get_logger

_logger = get_logger(__name__)

CONFIRMATION = "confirmation"
FAILED = "failed"
TRIGGERS = (CONFIRMATION, FAILED)

ConfirmationCallback = Callable[["ConfirmationMessage"], Union[Awaitable[Any], Any]]
FailureCallback = Callable[[Exception], Union[Awaitable[Any], Any]]


class SubscriptionState(Enum):
    """Transaction subscription lifecycle."""

    PENDING = "pending"
    IDLE = "idle"
    LISTENING = "listening"
    TERMINATED = "terminated"


@dataclass(frozen=True)
class ConfirmationMessage:
    """Payload passed to confirmation callbacks."""

    confirmations: int
    receipt: Receipt

    @property
    def data(self) -> Dict[str, Any]:
        return {"confirmations": self.confirmations}


class PendingOperation:
    """
    Handle to a transaction submission in flight.

    The submission starts immediately when created inside a running event
    loop, otherwise on the first call to result(). Awaiting result() from
    several coroutines is safe; cancelling one of them does not cancel the
    submission.
    """

    def __init__(self, submission: Awaitable[TransactionResponse]) -> None:
        self._submission = submission
        self._future: Optional[asyncio.Future[TransactionResponse]] = None
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return
        self._start()

    def _start(self) -> "asyncio.Future[TransactionResponse]":
        if self._future is None:
            self._future = asyncio.ensure_future(self._submission)
            self._future.add_done_callback(self._log_failure)
        return self._future

    @staticmethod
    def _log_failure(future: "asyncio.Future[TransactionResponse]") -> None:
        if future.cancelled():
            return
        # Retrieving the exception here keeps asyncio from reporting it as
        # never retrieved; result() still raises it to every awaiter.
        error = future.exception()
        if error is not None:
            _logger.debug("Transaction submission failed: %r", error)

    @property
    def done(self) -> bool:
        return self._future is not None and self._future.done()

    @property
    def resolved(self) -> Optional[TransactionResponse]:
        """The submitted transaction, or None while pending or after failure."""
        if not self.done or self._future.cancelled() or self._future.exception():
            return None
        return self._future.result()

    async def result(self) -> TransactionResponse:
        return await asyncio.shield(self._start())


@dataclass(eq=False)
class _ListenerSlot:
    """The single confirmation listener of a subscription."""

    event_name: Optional[str] = None
    listener: Optional[Listener] = None
    timer: Optional[asyncio.TimerHandle] = None
    delivered: bool = False


class TransactionSubscription:
    """
    Observable outcome of a single contract write.

    Args:
        pending: The submission, as a PendingOperation or any awaitable
            resolving to a TransactionResponse.
        transport: Transport used for receipts and block/transaction events.
            Shared; the subscription only adds and removes its own listener.
        timeout_ms: Lifetime of a confirmation listener. Defaults to the
            configured events timeout (2000ms).
    """

    def __init__(
        self,
        pending: Union[PendingOperation, Awaitable[TransactionResponse]],
        transport: Transport,
        *,
        timeout_ms: Optional[int] = None,
    ) -> None:
        if not isinstance(pending, PendingOperation):
            pending = PendingOperation(pending)
        self._pending = pending
        self._transport = transport
        self._timeout_ms = timeout_ms if timeout_ms is not None else get_config().events.timeout_ms
        self._slot: Optional[_ListenerSlot] = None
        self._error_callback: Optional[FailureCallback] = None
        self._terminated = False
        self._handler_tasks: Set["asyncio.Future[Any]"] = set()

    def __repr__(self) -> str:
        tx = self.transaction
        return (
            f"TransactionSubscription(state={self.state.value!r}, "
            f"tx_hash={tx.hash if tx else None!r})"
        )

    @property
    def state(self) -> SubscriptionState:
        if self._slot is not None:
            return SubscriptionState.LISTENING
        if self._terminated:
            return SubscriptionState.TERMINATED
        if self._pending.resolved is not None:
            return SubscriptionState.IDLE
        return SubscriptionState.PENDING

    @property
    def timeout_ms(self) -> int:
        return self._timeout_ms

    @property
    def transaction(self) -> Optional[TransactionResponse]:
        return self._pending.resolved

    async def get_transaction(self) -> TransactionResponse:
        """Wait for the submission and return the broadcast transaction."""
        return await self._pending.result()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    async def on(
        self,
        trigger: str,
        callback: Union[ConfirmationCallback, FailureCallback],
    ) -> None:
        """
        Register a callback.

        Args:
            trigger: "confirmation" or "failed".
            callback: Called with a ConfirmationMessage ("confirmation") or
                the error ("failed"). May be a coroutine function.

        Raises:
            InvalidArgumentError: Unknown trigger or non-callable callback.
            AlreadyListeningError: A confirmation listener is already active.

        Errors raised while submitting the transaction propagate unchanged.
        """
        if trigger not in TRIGGERS:
            raise InvalidArgumentError(
                "trigger",
                trigger,
                reason=f"use one of {list(TRIGGERS)}",
            )
        if not callable(callback):
            raise InvalidArgumentError("callback", callback, reason="must be callable")

        if trigger == FAILED:
            self._error_callback = callback
            return

        await self._add_listener(callback)

    def has_listener(self) -> bool:
        return self._slot is not None

    def remove_listener(self) -> None:
        """Detach the confirmation listener, if any. Idempotent."""
        if self._slot is not None:
            self._detach(self._slot)

    def remove_all_listeners(self) -> None:
        self.remove_listener()

    def off(self) -> None:
        self.remove_listener()

    def unsubscribe(self) -> None:
        self.remove_listener()

    async def wait_for_settlement(self, timeout: Optional[float] = None) -> Receipt:
        """Wait until the transaction is included and return its receipt."""
        tx = await self._pending.result()
        return await self._transport.wait_for_inclusion(tx.hash, timeout)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _add_listener(self, callback: ConfirmationCallback) -> None:
        if self._slot is not None:
            tx = self.transaction
            raise AlreadyListeningError(tx_hash=tx.hash if tx else None)

        # Claim the slot before suspending so a concurrent registration fails.
        slot = _ListenerSlot()
        self._slot = slot
        self._terminated = False

        try:
            tx = await self._pending.result()
            if self._slot is not slot:
                return
            receipt = await self._transport.get_receipt(tx.hash)
            if self._slot is not slot:
                return
        except BaseException:
            if self._slot is slot:
                self._slot = None
            raise

        if receipt is not None:
            # Already included: report confirmations on every new block.
            async def on_block(*_: Any) -> None:
                try:
                    current = await self._transport.get_receipt(tx.hash)
                except Exception as e:
                    self._emit_error(e)
                    return
                if current is not None:
                    await self._deliver(slot, callback, current)

            slot.event_name = BLOCK_EVENT
            slot.listener = on_block
        else:

            async def on_receipt(receipt: Receipt) -> None:
                await self._deliver(slot, callback, receipt)

            slot.event_name = tx.hash
            slot.listener = on_receipt

        self._transport.on(slot.event_name, slot.listener)
        slot.timer = asyncio.get_running_loop().call_later(
            self._timeout_ms / 1000,
            self._on_timeout,
            slot,
        )
        _logger.debug(
            "Confirmation listener attached on %s for tx %s (timeout %dms)",
            slot.event_name,
            tx.hash,
            self._timeout_ms,
        )

    async def _deliver(
        self,
        slot: _ListenerSlot,
        callback: ConfirmationCallback,
        receipt: Receipt,
    ) -> None:
        if self._slot is not slot:
            return
        slot.delivered = True
        message = ConfirmationMessage(confirmations=receipt.confirmations, receipt=receipt)
        try:
            result = callback(message)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            self._emit_error(CallbackFailureError(e, tx_hash=receipt.transaction_hash))

    def _on_timeout(self, slot: _ListenerSlot) -> None:
        if self._slot is not slot:
            return
        slot.timer = None
        delivered = slot.delivered
        self._detach(slot)
        _logger.debug("Confirmation listener retired after %dms", self._timeout_ms)
        if not delivered:
            tx = self.transaction
            self._emit_error(
                SubscriptionTimeoutError(self._timeout_ms, tx_hash=tx.hash if tx else None)
            )

    def _detach(self, slot: _ListenerSlot) -> None:
        if slot.timer is not None:
            slot.timer.cancel()
            slot.timer = None
        if slot.listener is not None and slot.event_name is not None:
            self._transport.remove_listener(slot.event_name, slot.listener)
            slot.listener = None
        if self._slot is slot:
            self._slot = None
            self._terminated = True

    def _emit_error(self, error: Exception) -> None:
        handler = self._error_callback
        if handler is None:
            _logger.warning("Dropping subscription error, no 'failed' handler: %s", error)
            return

        try:
            result = handler(error)
        except Exception:
            _logger.exception("'failed' handler raised while handling %s", error)
            return

        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._handler_tasks.add(task)
            task.add_done_callback(self._on_handler_done)

    def _on_handler_done(self, task: "asyncio.Future[Any]") -> None:
        self._handler_tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            _logger.error("'failed' handler raised", exc_info=task.exception())
