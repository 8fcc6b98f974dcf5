"""
Base exception class for chainbind.

Errors raised while binding a contract, dispatching a call or observing a
write subscription all derive from ChainbindError. Each one carries a
stable code that callers can switch on, plus the hash of the transaction
involved when there is one.

Errors produced after a write was dispatched (callback failures, listener
timeouts) are never raised; the subscription hands them to its "failed"
handler instead, so to_dict() is the usual way to report them.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

# Attributes shown by repr() and exported by to_dict(), in that order.
_FIELDS = ("message", "code", "tx_hash", "details")


def short_hash(tx_hash: str) -> str:
    """Abbreviate a transaction hash for messages: ``0x12345678...``."""
    return f"{tx_hash[:10]}..."


class ChainbindError(Exception):
    """
    Base exception for all chainbind errors.

    Attributes:
        message: Human-readable error description.
        code: Stable error code, e.g. "ALREADY_LISTENING" or "MISSING_SIGNER".
        tx_hash: Hash of the transaction the error concerns, if any.
        details: Extra context (offending field, timeout, original error type).

    Example:
        >>> error = ChainbindError(
        ...     "A listener is already attached to this subscription",
        ...     code="ALREADY_LISTENING",
        ...     tx_hash="0x5f3e2a9c41...",
        ... )
        >>> str(error)
        '[ALREADY_LISTENING] A listener is already attached to this subscription (tx: 0x5f3e2a9c...)'
    """

    def __init__(
        self,
        message: str,
        *,
        code: str = "CHAINBIND_ERROR",
        tx_hash: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.tx_hash = tx_hash
        self.details = dict(details) if details else {}

    def __str__(self) -> str:
        text = f"[{self.code}] {self.message}"
        if self.tx_hash:
            text += f" (tx: {short_hash(self.tx_hash)})"
        return text

    def __repr__(self) -> str:
        fields = ", ".join(f"{name}={getattr(self, name)!r}" for name in _FIELDS)
        return f"{type(self).__name__}({fields})"

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form, suitable for structured logs or a failure report."""
        data: Dict[str, Any] = {"error": type(self).__name__}
        data.update((name, getattr(self, name)) for name in _FIELDS)
        return data


class ConfigurationError(ChainbindError):
    """Raised when a configuration value cannot be loaded or is invalid."""

    def __init__(
        self,
        message: str,
        *,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code="CONFIGURATION_ERROR", details=details)
