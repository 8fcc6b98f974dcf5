"""
Event subscriptions.

An EventSubscription records which ABI events a caller asked for and
validates later registrations against that list. Registrations are not
forwarded to the transport: no log events are delivered.
"""

from __future__ import annotations

from typing import Any, Callable, Sequence, Tuple

from chainbind.errors import InvalidArgumentError, NotSubscribedError
from chainbind.transport.base import Transport
from chainbind.utils.logging import get_logger

_logger = get_logger(__name__)


class EventSubscription:
    def __init__(self, event_names: Sequence[str], transport: Transport) -> None:
        self._event_names: Tuple[str, ...] = tuple(event_names)
        self._transport = transport

    def __repr__(self) -> str:
        return f"EventSubscription(event_names={list(self._event_names)!r})"

    @property
    def event_names(self) -> Tuple[str, ...]:
        return self._event_names

    def on(self, event_name: str, callback: Callable[..., Any]) -> None:
        """
        Validate a registration for event_name.

        Raises:
            NotSubscribedError: event_name was not part of the subscription.
            InvalidArgumentError: callback is not callable.
        """
        if event_name not in self._event_names:
            raise NotSubscribedError(event_name)
        if not callable(callback):
            raise InvalidArgumentError("callback", callback, reason="must be callable")
        _logger.debug("Accepted registration for '%s'; log delivery is not wired", event_name)

    def remove_all_listeners(self) -> None:
        """No-op: nothing is registered with the transport."""
