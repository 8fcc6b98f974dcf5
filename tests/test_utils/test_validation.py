"""
Tests for validation predicates.
"""

import pytest

from chainbind.errors import InvalidArgumentError
from chainbind.signer import LocalSigner
from chainbind.utils.validation import (
    is_abi,
    is_address,
    is_signer,
    validate_abi,
    validate_address,
    validate_signer,
)

from tests.conftest import CONTRACT_ADDRESS, FakeSigner


class TestIsAddress:
    @pytest.mark.parametrize(
        "value",
        [
            CONTRACT_ADDRESS,
            "0x" + "a" * 40,
            "0x" + "A" * 40,
            "0xAbCdEf1234567890aBcDeF1234567890AbCdEf12",
        ],
    )
    def test_valid(self, value) -> None:
        assert is_address(value) is True

    @pytest.mark.parametrize(
        "value",
        [
            "not-hex",
            "0x" + "a" * 39,
            "0x" + "a" * 41,
            "0x" + "g" * 40,
            "a" * 42,
            "0X" + "a" * 40,
            " 0x" + "a" * 40,
            "0x" + "a" * 40 + "\n",
            None,
            42,
            b"0x" + b"a" * 40,
        ],
    )
    def test_invalid(self, value) -> None:
        assert is_address(value) is False


class TestIsAbi:
    def test_list_and_tuple(self) -> None:
        assert is_abi([]) is True
        assert is_abi([{"type": "function"}]) is True
        assert is_abi(()) is True

    def test_shallow(self) -> None:
        """Entry shape is not inspected."""
        assert is_abi([1, "two", None]) is True

    @pytest.mark.parametrize("value", [None, "[]", {"type": "function"}, 0])
    def test_invalid(self, value) -> None:
        assert is_abi(value) is False


class TestIsSigner:
    def test_signer_implementations(self) -> None:
        assert is_signer(FakeSigner()) is True
        assert is_signer(LocalSigner.create_random()) is True

    def test_lookalike_is_not_a_signer(self) -> None:
        """Having a signer-like call surface is not enough."""

        class LooksLikeSigner:
            address = "0x" + "a" * 40
            transport = None

            def connect(self, transport):
                return self

            async def send_transaction(self, *args):
                return None

        assert is_signer(LooksLikeSigner()) is False
        assert is_signer(None) is False


class TestValidators:
    def test_validate_address_returns_value(self) -> None:
        assert validate_address(CONTRACT_ADDRESS) == CONTRACT_ADDRESS

    def test_validate_address_error_fields(self) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            validate_address("not-hex", field_name="token")

        error = exc_info.value
        assert error.field == "token"
        assert error.value == "not-hex"
        assert error.details["field"] == "token"
        assert "40 hex" in error.message

    def test_validate_abi_copies(self) -> None:
        abi = ({"type": "function", "name": "f"},)
        assert validate_abi(abi) == [{"type": "function", "name": "f"}]

    def test_validate_signer_accepts_none(self) -> None:
        assert validate_signer(None) is None

    def test_validate_signer_rejects_other(self) -> None:
        with pytest.raises(InvalidArgumentError):
            validate_signer("0xkey")
