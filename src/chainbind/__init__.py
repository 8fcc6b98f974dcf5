"""
chainbind - ABI-driven contract bindings with observable writes.

Quick Start:
    >>> from chainbind import Contract, LocalSigner, create_transport
    >>> import asyncio
    >>>
    >>> async def main():
    ...     transport = create_transport()
    ...     contract = Contract("0x...", abi, transport=transport)
    ...     print(await contract.value())
    ...
    ...     signer = LocalSigner.from_private_key("0x...")
    ...     subscription = contract.with_signer(signer).setValue("hello")
    ...     await subscription.on("failed", print)
    ...     await subscription.on("confirmation", lambda msg: print(msg.confirmations))
    ...
    >>> asyncio.run(main())

Read functions (view/pure) return their decoded value. Write functions
return a TransactionSubscription immediately; confirmation, failure and
timeout are only observed through its callbacks.

Modules:
- `contract`: Contract, binder, transaction and event subscriptions
- `transport`: Transport interface and the web3.py JSON-RPC transport
- `signer`: Signer interface and the eth-account LocalSigner
- `config`: provider endpoint and listener timeout configuration
- `errors`: exception hierarchy
- `utils`: validation predicates and logging helpers
"""

from chainbind.version import __version__, __version_info__

# Contract
from chainbind.contract import (
    CONFIRMATION,
    FAILED,
    BoundFunctions,
    ConfirmationMessage,
    Contract,
    DescriptorEntry,
    EventSubscription,
    PendingOperation,
    ReadCall,
    SubscriptionState,
    TransactionSubscription,
    WriteCall,
    bind,
)

# Transport
from chainbind.transport import (
    BLOCK_EVENT,
    EventEmitterTransport,
    Receipt,
    TransactionResponse,
    Transport,
    Web3Transport,
    create_transport,
)

# Signer
from chainbind.signer import LocalSigner, Signer

# Configuration
from chainbind.config import (
    ChainbindConfig,
    EventsConfig,
    JsonRpcConfig,
    ProviderConfig,
    get_config,
    load_config_from_env,
    reset_config,
    set_config,
)

# Errors
from chainbind.errors import (
    AlreadyListeningError,
    CallbackFailureError,
    ChainbindError,
    ConfigurationError,
    InclusionTimeoutError,
    InvalidArgumentError,
    MissingSignerError,
    NotSubscribedError,
    SubscriptionTimeoutError,
    TransportError,
    UnknownEventError,
    UnknownFunctionError,
)

# Utilities
from chainbind.utils import (
    configure_logging,
    enable_debug,
    get_logger,
    is_abi,
    is_address,
    is_signer,
)

__all__ = [
    "__version__",
    "__version_info__",
    # Contract
    "Contract",
    "bind",
    "BoundFunctions",
    "DescriptorEntry",
    "ReadCall",
    "WriteCall",
    "TransactionSubscription",
    "PendingOperation",
    "SubscriptionState",
    "ConfirmationMessage",
    "EventSubscription",
    "CONFIRMATION",
    "FAILED",
    # Transport
    "BLOCK_EVENT",
    "Transport",
    "EventEmitterTransport",
    "Web3Transport",
    "create_transport",
    "Receipt",
    "TransactionResponse",
    # Signer
    "Signer",
    "LocalSigner",
    # Configuration
    "ChainbindConfig",
    "ProviderConfig",
    "JsonRpcConfig",
    "EventsConfig",
    "set_config",
    "get_config",
    "reset_config",
    "load_config_from_env",
    # Errors
    "ChainbindError",
    "ConfigurationError",
    "InvalidArgumentError",
    "MissingSignerError",
    "UnknownFunctionError",
    "UnknownEventError",
    "NotSubscribedError",
    "AlreadyListeningError",
    "CallbackFailureError",
    "SubscriptionTimeoutError",
    "TransportError",
    "InclusionTimeoutError",
    # Utilities
    "is_address",
    "is_abi",
    "is_signer",
    "get_logger",
    "configure_logging",
    "enable_debug",
]
