"""
Contract: the binding container.

Combines an address, an ABI and either a signer connected to a
transport or a transport alone. Functions of the ABI are reachable as
``contract.functions.<name>``, ``contract.call(name, *args)`` or directly
as ``contract.<name>`` when the name does not shadow a Contract attribute.

Example:
    >>> contract = Contract(address, abi, transport=transport)
    >>> await contract.value()
    'hello'
    >>> writable = contract.with_signer(signer)
    >>> subscription = writable.setValue("world")
    >>> await subscription.on("confirmation", on_confirmation)

Contracts are immutable: with_signer() and without_signer() return new
instances sharing address, ABI and transport.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from chainbind.contract.binder import BoundFunctions, CallStrategy, DescriptorEntry, bind, parse_abi
from chainbind.contract.events import EventSubscription
from chainbind.errors import InvalidArgumentError, UnknownEventError
from chainbind.signer import Signer
from chainbind.transport.base import Transport
from chainbind.transport.factory import create_transport
from chainbind.utils.logging import get_logger
from chainbind.utils.validation import validate_abi, validate_address, validate_signer

_logger = get_logger(__name__)


class Contract:
    """
    Bound contract.

    Args:
        address: Contract address (0x + 40 hex characters).
        abi: Contract ABI entries.
        signer: Optional signer; connected to the contract's transport.
        transport: Transport to use. Defaults to one built from the
            process-wide configuration (see chainbind.config).
        timeout_ms: Confirmation listener timeout for write subscriptions.
            Defaults to the configured events timeout.

    Raises:
        InvalidArgumentError: Malformed address, ABI or signer. Raised
            before any transport is created.
    """

    def __init__(
        self,
        address: str,
        abi: Sequence[Mapping[str, Any]],
        signer: Optional[Signer] = None,
        *,
        transport: Optional[Transport] = None,
        timeout_ms: Optional[int] = None,
    ) -> None:
        validate_address(address)
        abi_entries = validate_abi(abi)
        validate_signer(signer)

        self._address = address
        self._abi: List[Mapping[str, Any]] = abi_entries
        self._timeout_ms = timeout_ms
        self._transport = transport if transport is not None else create_transport()

        if signer is not None and signer.transport is not self._transport:
            signer = signer.connect(self._transport)
        self._signer = signer

        self._functions = bind(
            address,
            abi_entries,
            signer,
            transport=self._transport,
            timeout_ms=timeout_ms,
        )
        self._events: Dict[str, DescriptorEntry] = {
            entry.name: entry for entry in parse_abi(abi_entries) if entry.is_event
        }

    def __repr__(self) -> str:
        signer = self._signer.address if self._signer is not None else None
        return f"{self.__class__.__name__}(address={self._address!r}, signer={signer!r})"

    def __getattr__(self, name: str) -> CallStrategy:
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(self._functions, name)

    @property
    def address(self) -> str:
        return self._address

    @property
    def abi(self) -> List[Mapping[str, Any]]:
        return list(self._abi)

    @property
    def signer(self) -> Optional[Signer]:
        return self._signer

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def functions(self) -> BoundFunctions:
        return self._functions

    @property
    def events(self) -> List[str]:
        return list(self._events)

    def call(self, name: str, *args: Any) -> Any:
        """Dispatch to function name. See BoundFunctions.call()."""
        return self._functions.call(name, *args)

    def with_signer(self, signer: Signer) -> "Contract":
        """
        Return a contract bound to signer.

        Raises:
            InvalidArgumentError: signer is not a Signer.
        """
        if signer is None:
            raise InvalidArgumentError("signer", reason="cannot attach an empty signer")
        validate_signer(signer)
        return self._rebind(signer)

    def without_signer(self) -> "Contract":
        """Return a read-only contract sharing this contract's transport."""
        return self._rebind(None)

    def _rebind(self, signer: Optional[Signer]) -> "Contract":
        # Subclasses may take different constructor arguments.
        rebound = object.__new__(type(self))
        Contract.__init__(
            rebound,
            self._address,
            self._abi,
            signer,
            transport=self._transport,
            timeout_ms=self._timeout_ms,
        )
        return rebound

    def subscribe(self, event_names: Union[str, Sequence[str]]) -> EventSubscription:
        """
        Subscribe to ABI events by name.

        Raises:
            UnknownEventError: A name is not an event of the ABI.
        """
        if isinstance(event_names, str):
            event_names = [event_names]
        for event_name in event_names:
            if event_name not in self._events:
                raise UnknownEventError(event_name, available=self.events)
        return EventSubscription(event_names, self._transport)
