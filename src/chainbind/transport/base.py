"""
Transport interface for chainbind.

A transport is the provider through which read calls are performed and
ledger state is observed. Subscriptions only rely on:

- call(): execute a read-only contract call
- get_receipt(): look up a receipt by transaction hash
- on() / remove_listener(): publish/subscribe keyed by BLOCK_EVENT or a
  transaction hash
- wait_for_inclusion(): block until a transaction is included

EventEmitterTransport implements the listener registry; concrete
transports only provide the ledger queries and decide when to emit.
"""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Union

from chainbind.transport.types import Receipt
from chainbind.utils.logging import get_logger

_logger = get_logger(__name__)

Listener = Callable[..., Union[Awaitable[None], None]]


class Transport(ABC):
    """Abstract provider consumed by contracts and subscriptions."""

    @abstractmethod
    async def call(
        self,
        address: str,
        abi: Sequence[Dict[str, Any]],
        function_name: str,
        args: Sequence[Any],
        sender: Optional[str] = None,
    ) -> Any:
        """Execute a read-only call and return the decoded value."""

    @abstractmethod
    async def get_receipt(self, tx_hash: str) -> Optional[Receipt]:
        """Return the receipt for tx_hash, or None if not yet included."""

    @abstractmethod
    async def wait_for_inclusion(
        self,
        tx_hash: str,
        timeout: Optional[float] = None,
    ) -> Receipt:
        """Suspend until tx_hash is included and return its receipt."""

    @abstractmethod
    def on(self, key: str, listener: Listener) -> None:
        """Register listener under key."""

    @abstractmethod
    def remove_listener(self, key: str, listener: Listener) -> None:
        """Deregister listener from key. No-op if it is not registered."""

    @abstractmethod
    def listener_count(self, key: Optional[str] = None) -> int:
        """Number of listeners under key, or across all keys if key is None."""


class EventEmitterTransport(Transport):
    """
    Transport base class with an in-process listener registry.

    Listeners may be plain functions or coroutines. emit() runs them one
    at a time, in registration order.
    """

    def __init__(self) -> None:
        self._listeners: Dict[str, List[Listener]] = {}

    def on(self, key: str, listener: Listener) -> None:
        self._listeners.setdefault(key, []).append(listener)
        _logger.debug("Listener added on %s (%d total)", key, self.listener_count())
        self._listeners_changed()

    def remove_listener(self, key: str, listener: Listener) -> None:
        listeners = self._listeners.get(key)
        if not listeners or listener not in listeners:
            return
        listeners.remove(listener)
        if not listeners:
            del self._listeners[key]
        _logger.debug("Listener removed from %s (%d total)", key, self.listener_count())
        self._listeners_changed()

    def remove_all_listeners(self, key: Optional[str] = None) -> None:
        if key is None:
            self._listeners.clear()
        else:
            self._listeners.pop(key, None)
        self._listeners_changed()

    def listener_count(self, key: Optional[str] = None) -> int:
        if key is not None:
            return len(self._listeners.get(key, ()))
        return sum(len(listeners) for listeners in self._listeners.values())

    def keys(self) -> List[str]:
        """Keys that currently have at least one listener."""
        return list(self._listeners)

    async def emit(self, key: str, *args: Any) -> int:
        """
        Invoke every listener registered under key.

        Listener exceptions are logged and do not stop delivery to the
        remaining listeners.

        Returns:
            Number of listeners invoked.
        """
        listeners = list(self._listeners.get(key, ()))
        for listener in listeners:
            try:
                result = listener(*args)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                _logger.exception("Listener on %s raised", key)
        return len(listeners)

    def _listeners_changed(self) -> None:
        """Hook for subclasses that start or stop work based on listeners."""
