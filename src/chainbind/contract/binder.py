"""
Dynamic binder: turns an ABI into callable strategies.

Every ``function`` entry of the ABI is classified once, at bind time:

- ReadCall for ``view``/``pure`` (or legacy ``constant``) functions. Calling
  it returns a coroutine resolving to the decoded value. No signer needed.
- WriteCall for every other function. Calling it checks for a signer,
  starts the submission and returns a TransactionSubscription
  synchronously.

BoundFunctions maps entry names to strategies and dispatches through
call(name, *args) or attribute access.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from chainbind.contract.subscription import PendingOperation, TransactionSubscription
from chainbind.errors import InvalidArgumentError, MissingSignerError, UnknownFunctionError
from chainbind.signer import Signer
from chainbind.transport.base import Transport
from chainbind.utils.logging import get_logger
from chainbind.utils.validation import is_signer, validate_abi, validate_address, validate_signer

_logger = get_logger(__name__)

READ_MUTABILITIES = ("view", "pure")


@dataclass(frozen=True)
class DescriptorEntry:
    """One ABI entry, reduced to what binding needs."""

    name: str
    type: str
    state_mutability: Optional[str] = None
    constant: Optional[bool] = None
    inputs: Tuple[Mapping[str, Any], ...] = field(default_factory=tuple)
    outputs: Tuple[Mapping[str, Any], ...] = field(default_factory=tuple)

    @classmethod
    def from_abi(cls, entry: Mapping[str, Any]) -> "DescriptorEntry":
        if not isinstance(entry, Mapping):
            raise InvalidArgumentError("abi entry", entry, reason="must be a mapping")
        return cls(
            name=entry.get("name", ""),
            type=entry.get("type", "function"),
            state_mutability=entry.get("stateMutability"),
            constant=entry.get("constant"),
            inputs=tuple(entry.get("inputs") or ()),
            outputs=tuple(entry.get("outputs") or ()),
        )

    @property
    def is_function(self) -> bool:
        return self.type == "function" and bool(self.name)

    @property
    def is_event(self) -> bool:
        return self.type == "event" and bool(self.name)

    @property
    def is_read(self) -> bool:
        if self.state_mutability is not None:
            return self.state_mutability in READ_MUTABILITIES
        return bool(self.constant)

    @property
    def signature(self) -> str:
        types = ",".join(str(param.get("type", "")) for param in self.inputs)
        return f"{self.name}({types})"


def parse_abi(abi: Sequence[Mapping[str, Any]]) -> List[DescriptorEntry]:
    return [DescriptorEntry.from_abi(entry) for entry in abi]


@dataclass(frozen=True)
class BindingContext:
    """Everything a call strategy needs to reach the contract."""

    address: str
    abi: Tuple[Mapping[str, Any], ...]
    transport: Transport
    signer: Optional[Signer] = None
    timeout_ms: Optional[int] = None

    @property
    def read_transport(self) -> Transport:
        if self.signer is not None and self.signer.transport is not None:
            return self.signer.transport
        return self.transport


class ReadCall:
    """Strategy for read-only functions."""

    is_write = False

    def __init__(self, entry: DescriptorEntry, context: BindingContext) -> None:
        self.entry = entry
        self._context = context

    @property
    def name(self) -> str:
        return self.entry.name

    def __repr__(self) -> str:
        return f"ReadCall({self.entry.signature})"

    async def __call__(self, *args: Any) -> Any:
        ctx = self._context
        sender = ctx.signer.address if ctx.signer is not None else None
        return await ctx.read_transport.call(
            ctx.address,
            list(ctx.abi),
            self.name,
            list(args),
            sender=sender,
        )


class WriteCall:
    """Strategy for state-changing functions."""

    is_write = True

    def __init__(self, entry: DescriptorEntry, context: BindingContext) -> None:
        self.entry = entry
        self._context = context

    @property
    def name(self) -> str:
        return self.entry.name

    def __repr__(self) -> str:
        return f"WriteCall({self.entry.signature})"

    def __call__(self, *args: Any) -> TransactionSubscription:
        """
        Submit the write and return its subscription.

        Raises:
            MissingSignerError: If the binding has no signer.
        """
        ctx = self._context
        if not is_signer(ctx.signer):
            raise MissingSignerError(self.name, address=ctx.address)

        _logger.debug("Dispatching write %s on %s", self.entry.signature, ctx.address)
        pending = PendingOperation(
            ctx.signer.send_transaction(ctx.address, list(ctx.abi), self.name, list(args))
        )
        return TransactionSubscription(pending, ctx.transport, timeout_ms=ctx.timeout_ms)


CallStrategy = Union[ReadCall, WriteCall]


class BoundFunctions:
    """
    Name to call strategy table of a bound contract.

    Example:
        >>> value = await functions.call("value")
        >>> subscription = functions.setValue("hello")
    """

    def __init__(self, strategies: Mapping[str, CallStrategy]) -> None:
        self._strategies: Dict[str, CallStrategy] = dict(strategies)

    def __repr__(self) -> str:
        return f"BoundFunctions({sorted(self._strategies)})"

    def __contains__(self, name: object) -> bool:
        return name in self._strategies

    def __iter__(self) -> Iterator[str]:
        return iter(self._strategies)

    def __len__(self) -> int:
        return len(self._strategies)

    def __getattr__(self, name: str) -> CallStrategy:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._strategies[name]
        except KeyError:
            raise AttributeError(f"Function '{name}' not found in ABI") from None

    def get(self, name: str) -> CallStrategy:
        """
        Raises:
            UnknownFunctionError: If name is not a function of the ABI.
        """
        try:
            return self._strategies[name]
        except KeyError:
            raise UnknownFunctionError(name) from None

    def call(self, name: str, *args: Any) -> Any:
        """
        Invoke function name.

        Returns:
            A coroutine for read functions, a TransactionSubscription for
            write functions.
        """
        return self.get(name)(*args)

    @property
    def read_functions(self) -> List[str]:
        return [name for name, strategy in self._strategies.items() if not strategy.is_write]

    @property
    def write_functions(self) -> List[str]:
        return [name for name, strategy in self._strategies.items() if strategy.is_write]


def bind(
    address: str,
    abi: Sequence[Mapping[str, Any]],
    signer: Optional[Signer] = None,
    *,
    transport: Optional[Transport] = None,
    timeout_ms: Optional[int] = None,
) -> BoundFunctions:
    """
    Build the call strategy table for a contract.

    Args:
        address: Contract address (0x + 40 hex characters).
        abi: Contract ABI entries.
        signer: Optional signer; required only when a write is invoked.
        transport: Transport for reads and subscriptions. Falls back to the
            signer's transport.
        timeout_ms: Confirmation listener timeout for write subscriptions.

    Raises:
        InvalidArgumentError: Malformed address, ABI, signer, or no transport.
    """
    validate_address(address)
    entries = parse_abi(validate_abi(abi))
    validate_signer(signer)

    if transport is None and signer is not None:
        transport = signer.transport
    if transport is None:
        raise InvalidArgumentError("transport", reason="a transport or connected signer is required")

    context = BindingContext(
        address=address,
        abi=tuple(abi),
        transport=transport,
        signer=signer,
        timeout_ms=timeout_ms,
    )

    strategies: Dict[str, CallStrategy] = {}
    for entry in entries:
        if not entry.is_function:
            continue
        if entry.is_read:
            strategies[entry.name] = ReadCall(entry, context)
        else:
            strategies[entry.name] = WriteCall(entry, context)

    _logger.debug(
        "Bound %d functions for %s (signer=%s)",
        len(strategies),
        address,
        signer.address if signer is not None else None,
    )
    return BoundFunctions(strategies)
