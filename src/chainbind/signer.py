"""
Signers for chainbind.

A Signer is the capability required by write functions. Contracts only
check that a value implements this interface (see
chainbind.utils.validation.is_signer); they never inspect its call
surface.

LocalSigner signs with an eth-account LocalAccount and broadcasts
through a Web3Transport.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Sequence

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import Web3

from chainbind.errors import InvalidArgumentError, TransportError
from chainbind.transport.base import Transport
from chainbind.transport.types import TransactionResponse, to_hex
from chainbind.transport.web3_transport import Web3Transport
from chainbind.utils.logging import get_logger

_logger = get_logger(__name__)


class Signer(ABC):
    """Credential holder able to authorize contract writes."""

    @property
    @abstractmethod
    def address(self) -> str:
        """Address of the signing account."""

    @property
    @abstractmethod
    def transport(self) -> Optional[Transport]:
        """Transport this signer is connected to, if any."""

    @abstractmethod
    def connect(self, transport: Transport) -> "Signer":
        """Return a signer for the same account bound to transport."""

    @abstractmethod
    async def send_transaction(
        self,
        address: str,
        abi: Sequence[Dict[str, Any]],
        function_name: str,
        args: Sequence[Any],
    ) -> TransactionResponse:
        """Sign and broadcast a call to function_name on the contract at address."""


class LocalSigner(Signer):
    """
    Signer backed by a local private key.

    Example:
        >>> signer = LocalSigner.from_private_key("0x" + "11" * 32)
        >>> signer = signer.connect(transport)
    """

    def __init__(
        self,
        account: LocalAccount,
        transport: Optional[Transport] = None,
    ) -> None:
        self._account = account
        self._transport = transport

    @classmethod
    def from_private_key(cls, private_key: str) -> "LocalSigner":
        """
        Raises:
            InvalidArgumentError: If the key cannot be decoded.
        """
        try:
            account = Account.from_key(private_key)
        except Exception as e:
            raise InvalidArgumentError("private_key", reason="not a valid private key") from e
        return cls(account)

    @classmethod
    def create_random(cls) -> "LocalSigner":
        return cls(Account.create())

    def __repr__(self) -> str:
        return f"LocalSigner(address={self.address!r})"

    @property
    def address(self) -> str:
        return self._account.address

    @property
    def transport(self) -> Optional[Transport]:
        return self._transport

    def connect(self, transport: Transport) -> "LocalSigner":
        return LocalSigner(self._account, transport)

    def _require_web3_transport(self) -> Web3Transport:
        if not isinstance(self._transport, Web3Transport):
            raise TransportError(
                "LocalSigner must be connected to a Web3Transport to send transactions",
                details={"transport": repr(self._transport)},
            )
        return self._transport

    async def send_transaction(
        self,
        address: str,
        abi: Sequence[Dict[str, Any]],
        function_name: str,
        args: Sequence[Any],
    ) -> TransactionResponse:
        transport = self._require_web3_transport()
        w3 = transport.web3

        contract = w3.eth.contract(address=Web3.to_checksum_address(address), abi=list(abi))
        function = contract.functions[function_name](*args)

        nonce = await w3.eth.get_transaction_count(self.address, "pending")
        chain_id = await w3.eth.chain_id
        tx = await function.build_transaction(
            {
                "from": self.address,
                "nonce": nonce,
                "chainId": chain_id,
            }
        )

        signed = self._account.sign_transaction(tx)
        tx_hash = await w3.eth.send_raw_transaction(signed.raw_transaction)
        tx_hex = to_hex(tx_hash)
        _logger.info(
            "Transaction sent for %s on %s hash=%s nonce=%d",
            function_name,
            address,
            tx_hex,
            nonce,
        )
        return TransactionResponse(
            hash=tx_hex,
            nonce=nonce,
            from_address=self.address,
            to=address,
        )
