"""
Contract bindings.

- Contract: binding container (address, ABI, signer/transport)
- bind, BoundFunctions, ReadCall, WriteCall: ABI to call strategy table
- TransactionSubscription: observable outcome of a write
- EventSubscription: validated event-name subscription
"""

from chainbind.contract.binder import (
    BindingContext,
    BoundFunctions,
    CallStrategy,
    DescriptorEntry,
    ReadCall,
    WriteCall,
    bind,
    parse_abi,
)
from chainbind.contract.contract import Contract
from chainbind.contract.events import EventSubscription
from chainbind.contract.subscription import (
    CONFIRMATION,
    FAILED,
    ConfirmationMessage,
    PendingOperation,
    SubscriptionState,
    TransactionSubscription,
)

__all__ = [
    "Contract",
    # Binder
    "bind",
    "parse_abi",
    "BindingContext",
    "BoundFunctions",
    "CallStrategy",
    "DescriptorEntry",
    "ReadCall",
    "WriteCall",
    # Subscriptions
    "CONFIRMATION",
    "FAILED",
    "ConfirmationMessage",
    "PendingOperation",
    "SubscriptionState",
    "TransactionSubscription",
    "EventSubscription",
]
