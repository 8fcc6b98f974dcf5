"""
Exceptions produced by transaction subscriptions and transports.

AlreadyListeningError is raised at registration time. CallbackFailureError
and SubscriptionTimeoutError are never raised to the caller: they are
delivered to the subscription's "failed" handler.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from chainbind.errors.base import ChainbindError


class AlreadyListeningError(ChainbindError):
    """Raised when a second confirmation listener is requested."""

    def __init__(self, *, tx_hash: Optional[str] = None) -> None:
        super().__init__(
            "Subscription already listening",
            code="ALREADY_LISTENING",
            tx_hash=tx_hash,
        )


class CallbackFailureError(ChainbindError):
    """
    Wraps an exception raised by a caller-supplied confirmation callback.

    Attributes:
        original: The exception raised by the callback.
    """

    def __init__(
        self,
        original: BaseException,
        *,
        tx_hash: Optional[str] = None,
    ) -> None:
        super().__init__(
            f"Callback function with error: {original}",
            code="CALLBACK_FAILURE",
            tx_hash=tx_hash,
            details={"original_type": type(original).__name__},
        )
        self.original = original


class SubscriptionTimeoutError(ChainbindError):
    """Delivered when a confirmation listener is retired by its timeout."""

    def __init__(
        self,
        timeout_ms: int,
        *,
        tx_hash: Optional[str] = None,
    ) -> None:
        super().__init__(
            f"Listener removed after reached timeout of {timeout_ms}ms",
            code="SUBSCRIPTION_TIMEOUT",
            tx_hash=tx_hash,
            details={"timeout_ms": timeout_ms},
        )
        self.timeout_ms = timeout_ms


class TransportError(ChainbindError):
    """Raised when the underlying provider request fails."""

    def __init__(
        self,
        message: str,
        *,
        endpoint: Optional[str] = None,
        tx_hash: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if endpoint:
            details["endpoint"] = endpoint

        super().__init__(
            message,
            code="TRANSPORT_ERROR",
            tx_hash=tx_hash,
            details=details,
        )
        self.endpoint = endpoint


class InclusionTimeoutError(TransportError):
    """Raised when a transaction is not included within the wait limit."""

    def __init__(self, tx_hash: str, timeout: float) -> None:
        super().__init__(
            f"Transaction not included after {timeout}s",
            tx_hash=tx_hash,
            details={"timeout_s": timeout},
        )
        self.code = "INCLUSION_TIMEOUT"
        self.timeout = timeout
