"""
Exceptions raised while binding a contract or calling its functions.

These are raised synchronously to the caller at construction,
bind or invocation time.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from chainbind.errors.base import ChainbindError


class InvalidArgumentError(ChainbindError):
    """
    Raised when an address, ABI, signer or callback argument is malformed.

    Example:
        >>> raise InvalidArgumentError("address", "not-hex", reason="must be 0x + 40 hex chars")
    """

    def __init__(
        self,
        field: str,
        value: Any = None,
        *,
        reason: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        details["field"] = field
        if value is not None:
            details["value"] = repr(value)

        message = f"Invalid {field}"
        if reason:
            message += f": {reason}"

        super().__init__(message, code="INVALID_ARGUMENT", details=details)
        self.field = field
        self.value = value
        self.reason = reason


class MissingSignerError(ChainbindError):
    """Raised when a write function is invoked on a contract without a signer."""

    def __init__(
        self,
        function_name: str,
        *,
        address: Optional[str] = None,
    ) -> None:
        details: Dict[str, Any] = {"function": function_name}
        if address:
            details["address"] = address

        super().__init__(
            f"Cannot call write function '{function_name}' without a signer",
            code="MISSING_SIGNER",
            details=details,
        )
        self.function_name = function_name


class UnknownFunctionError(ChainbindError):
    """Raised when dispatching a name that is not a function of the ABI."""

    def __init__(self, function_name: str) -> None:
        super().__init__(
            f"Function '{function_name}' not found in ABI",
            code="UNKNOWN_FUNCTION",
            details={"function": function_name},
        )
        self.function_name = function_name


class UnknownEventError(ChainbindError):
    """Raised when subscribing to an event the ABI does not declare."""

    def __init__(
        self,
        event_name: str,
        *,
        available: Optional[List[str]] = None,
    ) -> None:
        super().__init__(
            f"Event '{event_name}' not found",
            code="UNKNOWN_EVENT",
            details={"event": event_name, "available": available or []},
        )
        self.event_name = event_name


class NotSubscribedError(ChainbindError):
    """Raised when registering a callback for an event outside the subscription."""

    def __init__(self, event_name: str) -> None:
        super().__init__(
            f"This subscription isn't subscribed on '{event_name}' event",
            code="NOT_SUBSCRIBED",
            details={"event": event_name},
        )
        self.event_name = event_name
