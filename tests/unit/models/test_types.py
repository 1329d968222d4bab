"""Tests for shared pydantic types."""

import pytest
from pydantic import BaseModel, ValidationError

from pairswap.models.types import (
    UINT256_MAX,
    Address,
    Uint256,
    is_valid_address,
    is_zero_address,
    normalize_address,
    validate_uint256,
)

MIXED_CASE = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"


class Payload(BaseModel):
    account: Address
    amount: Uint256


class TestAddress:
    def test_normalized_to_lowercase(self):
        assert Payload(account=MIXED_CASE, amount=1).account == MIXED_CASE.lower()

    def test_prefix_added(self):
        assert normalize_address(MIXED_CASE[2:]) == MIXED_CASE.lower()

    @pytest.mark.parametrize("value", ["0x1234", "0x" + "zz" * 20, "", "0x" + "00" * 21])
    def test_invalid(self, value):
        with pytest.raises(ValidationError):
            Payload(account=value, amount=1)

    def test_validate_flag(self):
        with pytest.raises(ValueError):
            normalize_address("0x1234", validate=True)

    def test_predicates(self):
        assert is_valid_address(MIXED_CASE)
        assert not is_valid_address(MIXED_CASE[2:])
        assert not is_valid_address(None)  # type: ignore[arg-type]
        assert is_zero_address("0x" + "00" * 20)
        assert not is_zero_address(MIXED_CASE)


class TestUint256:
    def test_accepts_decimal_string(self):
        assert Payload(account=MIXED_CASE, amount="1000000000000000000").amount == 10**18

    def test_serialized_as_string_in_json(self):
        """Large amounts survive JavaScript clients."""
        payload = Payload(account=MIXED_CASE, amount=10**30)
        assert payload.model_dump(mode="json")["amount"] == str(10**30)
        assert payload.model_dump()["amount"] == 10**30

    @pytest.mark.parametrize("value", [-1, "-1", "1.5", "abc", True, 1.5, UINT256_MAX + 1])
    def test_invalid(self, value):
        with pytest.raises(ValidationError):
            Payload(account=MIXED_CASE, amount=value)

    def test_validate_uint256_bounds(self):
        assert validate_uint256(UINT256_MAX) == UINT256_MAX
        assert validate_uint256("0") == 0
        with pytest.raises(ValueError):
            validate_uint256(UINT256_MAX + 1)
