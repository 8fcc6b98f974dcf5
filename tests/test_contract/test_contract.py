"""
Tests for Contract (binding container).

Tests for:
- Construction validation
- Read/write scenarios with and without a signer
- Signer attach/detach returning new instances
- Event subscription validation
"""

from typing import List

import pytest

import chainbind.contract.contract as contract_module
from chainbind import Contract, EventSubscription, TransactionSubscription
from chainbind.config import set_config
from chainbind.contract.subscription import ConfirmationMessage
from chainbind.errors import (
    AlreadyListeningError,
    InvalidArgumentError,
    MissingSignerError,
    NotSubscribedError,
    UnknownEventError,
)

from tests.conftest import CONTRACT_ADDRESS, SIGNER_ADDRESS, TX_HASH, FakeSigner


class TestConstruction:
    """Tests for Contract.__init__ validation."""

    def test_invalid_address_before_transport(self, abi, monkeypatch) -> None:
        """A bad address fails before any transport is created."""

        def fail_create_transport(*_args, **_kwargs):
            raise AssertionError("transport must not be created")

        monkeypatch.setattr(contract_module, "create_transport", fail_create_transport)

        with pytest.raises(InvalidArgumentError):
            Contract("not-hex", abi)

    @pytest.mark.parametrize("address", ["0x123", "1234567890123456789012345678901234567890", 42, None])
    def test_rejects_malformed_addresses(self, abi, transport, address) -> None:
        with pytest.raises(InvalidArgumentError):
            Contract(address, abi, transport=transport)

    @pytest.mark.parametrize("abi_value", [None, "[]", {"name": "f"}])
    def test_rejects_malformed_abi(self, transport, abi_value) -> None:
        with pytest.raises(InvalidArgumentError):
            Contract(CONTRACT_ADDRESS, abi_value, transport=transport)

    def test_rejects_invalid_signer(self, abi, transport) -> None:
        with pytest.raises(InvalidArgumentError):
            Contract(CONTRACT_ADDRESS, abi, "0xprivatekey", transport=transport)

    def test_mixed_case_address_kept(self, abi, transport) -> None:
        address = "0xAbCdEf1234567890aBcDeF1234567890AbCdEf12"
        contract = Contract(address, abi, transport=transport)

        assert contract.address == address

    def test_default_transport_from_config(self, abi, monkeypatch) -> None:
        created = []

        def fake_create_transport():
            created.append(True)
            return FakeTransportForDefault()

        monkeypatch.setattr(contract_module, "create_transport", fake_create_transport)
        contract = Contract(CONTRACT_ADDRESS, abi)

        assert created == [True]
        assert isinstance(contract.transport, FakeTransportForDefault)

    def test_signer_connected_to_transport(self, abi, signer, transport) -> None:
        contract = Contract(CONTRACT_ADDRESS, abi, signer, transport=transport)

        assert contract.signer is not signer
        assert contract.signer.address == SIGNER_ADDRESS
        assert contract.signer.transport is transport

    def test_exposes_events_and_functions(self, abi, transport) -> None:
        contract = Contract(CONTRACT_ADDRESS, abi, transport=transport)

        assert contract.events == ["ValueChanged"]
        assert contract.functions.read_functions == ["getValue"]
        assert contract.functions.write_functions == ["setValue"]

    @pytest.mark.asyncio
    async def test_write_timeout_from_config(self, abi, signer, transport) -> None:
        set_config({"events": {"timeout_ms": 300}})
        contract = Contract(CONTRACT_ADDRESS, abi, signer, transport=transport)

        subscription = contract.setValue("x")

        assert subscription.timeout_ms == 300
        await subscription.get_transaction()

    @pytest.mark.asyncio
    async def test_write_timeout_override(self, abi, signer, transport) -> None:
        contract = Contract(CONTRACT_ADDRESS, abi, signer, transport=transport, timeout_ms=50)

        subscription = contract.setValue("x")

        assert subscription.timeout_ms == 50
        await subscription.get_transaction()


class FakeTransportForDefault:
    """Stand-in returned by a patched create_transport."""


class TestReadWriteScenario:
    """Read method getValue() and write method setValue(string)."""

    @pytest.mark.asyncio
    async def test_without_signer(self, abi, transport) -> None:
        contract = Contract(CONTRACT_ADDRESS, abi, transport=transport)

        with pytest.raises(MissingSignerError):
            contract.setValue("x")

        assert await contract.getValue() == "hello"

    @pytest.mark.asyncio
    async def test_with_signer(self, abi, signer, transport) -> None:
        contract = Contract(CONTRACT_ADDRESS, abi, signer, transport=transport)

        subscription = contract.setValue("x")

        assert isinstance(subscription, TransactionSubscription)
        assert subscription.has_listener() is False
        assert await contract.getValue() == "hello"
        assert await contract.call("getValue") == "hello"
        await subscription.get_transaction()

    @pytest.mark.asyncio
    async def test_double_confirmation_registration(self, abi, signer, transport) -> None:
        contract = Contract(CONTRACT_ADDRESS, abi, signer, transport=transport)
        subscription = contract.setValue("x")

        await subscription.on("confirmation", lambda message: None)
        with pytest.raises(AlreadyListeningError):
            await subscription.on("confirmation", lambda message: None)

        subscription.unsubscribe()

    @pytest.mark.asyncio
    async def test_confirmation_end_to_end(self, abi, signer, transport) -> None:
        contract = Contract(CONTRACT_ADDRESS, abi, signer, transport=transport)
        received: List[ConfirmationMessage] = []
        errors: List[Exception] = []

        subscription = contract.setValue("x")
        await subscription.on("failed", errors.append)
        await subscription.on("confirmation", received.append)
        await transport.emit(TX_HASH, transport.mine(TX_HASH))

        assert [m.confirmations for m in received] == [1]
        assert errors == []
        subscription.off()
        assert transport.listener_count() == 0

    @pytest.mark.asyncio
    async def test_each_write_gets_its_own_subscription(self, abi, signer, transport) -> None:
        contract = Contract(CONTRACT_ADDRESS, abi, signer, transport=transport)

        first = contract.setValue("a")
        second = contract.setValue("b")

        assert first is not second
        await first.get_transaction()
        await second.get_transaction()
        assert [call[2] for call in signer.sent] == [("a",), ("b",)]


class TestRebinding:
    """Tests for with_signer() / without_signer()."""

    def test_with_signer_returns_new_instance(self, abi, signer, transport) -> None:
        read_only = Contract(CONTRACT_ADDRESS, abi, transport=transport)

        writable = read_only.with_signer(signer)

        assert writable is not read_only
        assert read_only.signer is None
        assert writable.signer.address == SIGNER_ADDRESS
        assert writable.address == read_only.address
        assert writable.abi == read_only.abi
        assert writable.transport is read_only.transport
        with pytest.raises(MissingSignerError):
            read_only.setValue("x")

    @pytest.mark.asyncio
    async def test_without_signer(self, abi, signer, transport) -> None:
        writable = Contract(CONTRACT_ADDRESS, abi, signer, transport=transport)

        read_only = writable.without_signer()

        assert read_only.signer is None
        assert writable.signer is not None
        with pytest.raises(MissingSignerError):
            read_only.setValue("x")
        assert await read_only.getValue() == "hello"

    @pytest.mark.asyncio
    async def test_dispatched_subscription_survives_rebinding(self, abi, signer, transport) -> None:
        writable = Contract(CONTRACT_ADDRESS, abi, signer, transport=transport)
        subscription = writable.setValue("x")
        received: List[int] = []

        writable.without_signer()
        await subscription.on("confirmation", lambda m: received.append(m.confirmations))
        await transport.emit(TX_HASH, transport.mine(TX_HASH))

        assert received == [1]
        subscription.remove_listener()

    @pytest.mark.parametrize("bad_signer", [None, "0xkey", object()])
    def test_with_invalid_signer(self, abi, transport, bad_signer) -> None:
        contract = Contract(CONTRACT_ADDRESS, abi, transport=transport)

        with pytest.raises(InvalidArgumentError):
            contract.with_signer(bad_signer)

    def test_subclass_preserved(self, abi, signer, transport) -> None:
        class SimpleStorage(Contract):
            def __init__(self, address, transport):
                super().__init__(address, abi, transport=transport)

        storage = SimpleStorage(CONTRACT_ADDRESS, transport)
        writable = storage.with_signer(FakeSigner())

        assert isinstance(writable, SimpleStorage)
        assert writable.signer is not None


class TestSubscribe:
    """Tests for Contract.subscribe() and EventSubscription.on()."""

    def test_unknown_event(self, abi, transport) -> None:
        contract = Contract(CONTRACT_ADDRESS, abi, transport=transport)

        with pytest.raises(UnknownEventError) as exc_info:
            contract.subscribe(["ValueChanged", "Transfer"])

        assert exc_info.value.event_name == "Transfer"
        assert exc_info.value.details["available"] == ["ValueChanged"]

    def test_function_name_is_not_an_event(self, abi, transport) -> None:
        contract = Contract(CONTRACT_ADDRESS, abi, transport=transport)

        with pytest.raises(UnknownEventError):
            contract.subscribe(["setValue"])

    def test_subscribe_known_event(self, abi, transport) -> None:
        contract = Contract(CONTRACT_ADDRESS, abi, transport=transport)

        subscription = contract.subscribe(["ValueChanged"])

        assert isinstance(subscription, EventSubscription)
        assert subscription.event_names == ("ValueChanged",)

    def test_subscribe_single_name(self, abi, transport) -> None:
        contract = Contract(CONTRACT_ADDRESS, abi, transport=transport)

        assert contract.subscribe("ValueChanged").event_names == ("ValueChanged",)

    def test_on_validates_event_name(self, abi, transport) -> None:
        subscription = Contract(CONTRACT_ADDRESS, abi, transport=transport).subscribe(["ValueChanged"])

        subscription.on("ValueChanged", lambda event: None)
        with pytest.raises(NotSubscribedError) as exc_info:
            subscription.on("Transfer", lambda event: None)

        assert exc_info.value.code == "NOT_SUBSCRIBED"

    def test_on_requires_callable(self, abi, transport) -> None:
        subscription = Contract(CONTRACT_ADDRESS, abi, transport=transport).subscribe(["ValueChanged"])

        with pytest.raises(InvalidArgumentError):
            subscription.on("ValueChanged", None)

    def test_registration_is_not_wired_to_transport(self, abi, transport) -> None:
        subscription = Contract(CONTRACT_ADDRESS, abi, transport=transport).subscribe(["ValueChanged"])

        subscription.on("ValueChanged", lambda event: None)
        subscription.remove_all_listeners()

        assert transport.listener_count() == 0
