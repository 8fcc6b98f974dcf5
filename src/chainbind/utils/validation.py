"""
Validation predicates for chainbind.

Pure functions used by the binder to sanity-check:
- Contract addresses
- ABI shape
- Signer capability

The ``is_*`` predicates never raise. The ``validate_*`` wrappers raise
InvalidArgumentError on failure.
"""

from __future__ import annotations

import re
from typing import Any, List, Optional

from chainbind.errors import InvalidArgumentError

ADDRESS_PATTERN = re.compile(r"0x[0-9a-fA-F]{40}")


def is_address(value: Any) -> bool:
    """True iff value is a 0x-prefixed, 40 hex digit string."""
    return isinstance(value, str) and ADDRESS_PATTERN.fullmatch(value) is not None


def is_abi(value: Any) -> bool:
    """
    True iff value is an ordered sequence of entries.

    Intentionally shallow: entry shape is not inspected.
    """
    return value is not None and isinstance(value, (list, tuple))


def is_signer(value: Any) -> bool:
    """True iff value implements the Signer interface."""
    # Imported here: chainbind.signer depends on this module.
    from chainbind.signer import Signer

    return isinstance(value, Signer)


def validate_address(address: Any, field_name: str = "address") -> str:
    """
    Validate a contract address.

    Returns:
        The address unchanged.

    Raises:
        InvalidArgumentError: If the address is not 0x + 40 hex characters.
    """
    if not is_address(address):
        raise InvalidArgumentError(
            field_name,
            address,
            reason="must be 0x followed by 40 hex characters",
        )
    return address


def validate_abi(abi: Any, field_name: str = "abi") -> List[Any]:
    if not is_abi(abi):
        raise InvalidArgumentError(field_name, abi, reason="must be a list of entries")
    return list(abi)


def validate_signer(signer: Any, field_name: str = "signer") -> Optional[Any]:
    """
    Validate an optional signer.

    ``None`` is accepted and returned as is.

    Raises:
        InvalidArgumentError: If signer is set but is not a Signer.
    """
    if signer is not None and not is_signer(signer):
        raise InvalidArgumentError(field_name, signer, reason="must implement Signer")
    return signer
