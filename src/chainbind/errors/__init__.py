"""
Exception hierarchy for chainbind.

All exceptions inherit from ChainbindError.
"""

from chainbind.errors.base import ChainbindError, ConfigurationError
from chainbind.errors.contract import (
    InvalidArgumentError,
    MissingSignerError,
    NotSubscribedError,
    UnknownEventError,
    UnknownFunctionError,
)
from chainbind.errors.subscription import (
    AlreadyListeningError,
    CallbackFailureError,
    InclusionTimeoutError,
    SubscriptionTimeoutError,
    TransportError,
)

__all__ = [
    # Base
    "ChainbindError",
    "ConfigurationError",
    # Binding
    "InvalidArgumentError",
    "MissingSignerError",
    "UnknownFunctionError",
    "UnknownEventError",
    "NotSubscribedError",
    # Subscriptions
    "AlreadyListeningError",
    "CallbackFailureError",
    "SubscriptionTimeoutError",
    # Transport
    "TransportError",
    "InclusionTimeoutError",
]
