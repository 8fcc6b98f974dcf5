"""
chainbind utilities.

Validation predicates and logging helpers.
"""

from chainbind.utils.logging import (
    configure_logging,
    disable_logging,
    enable_debug,
    get_logger,
    set_level,
)
from chainbind.utils.validation import (
    is_abi,
    is_address,
    is_signer,
    validate_abi,
    validate_address,
    validate_signer,
)

__all__ = [
    # Validation
    "is_address",
    "is_abi",
    "is_signer",
    "validate_address",
    "validate_abi",
    "validate_signer",
    # Logging
    "get_logger",
    "configure_logging",
    "set_level",
    "disable_logging",
    "enable_debug",
]
