"""Shared type definitions for pairswap models.

These types are used by the API payloads and the event records.
"""

from typing import Annotated, Any

from pydantic import BeforeValidator, Field, PlainSerializer

from pairswap.constants import ZERO_ADDRESS

# Maximum uint256 value
UINT256_MAX = 2**256 - 1


def validate_uint256(value: Any) -> int:
    """Validate that a value is a valid uint256.

    Accepts ints and decimal strings. Amounts travel as decimal strings in JSON
    because 18-decimal balances overflow JavaScript numbers.

    Args:
        value: Value to validate (string or int)

    Returns:
        The amount as an int

    Raises:
        ValueError: If value is not a non-negative integer within uint256 range
    """
    if isinstance(value, bool):
        raise ValueError("Uint256 must be string or int, got bool")
    if isinstance(value, int):
        int_value = value
    elif isinstance(value, str):
        try:
            int_value = int(value)
        except ValueError as err:
            raise ValueError(f"Uint256 must be a decimal integer string: '{value}'") from err
    else:
        raise ValueError(f"Uint256 must be string or int, got {type(value).__name__}")

    if int_value < 0:
        raise ValueError(f"Uint256 cannot be negative: {value}")
    if int_value > UINT256_MAX:
        raise ValueError(f"Uint256 overflow: {value} > 2^256-1")
    return int_value


def _normalize_before_validation(value: Any) -> Any:
    if isinstance(value, str):
        return normalize_address(value)
    return value


# 20-byte address, normalized to lowercase before pattern matching
Address = Annotated[
    str,
    BeforeValidator(_normalize_before_validation),
    Field(pattern=r"^0x[a-f0-9]{40}$"),
]

# 256-bit unsigned integer, accepted as int or decimal string, written to JSON as a string
Uint256 = Annotated[
    int,
    BeforeValidator(validate_uint256),
    PlainSerializer(str, return_type=str, when_used="json"),
    Field(description="256-bit unsigned integer (int or decimal string)"),
]


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Normalize an address to lowercase with 0x prefix.

    Args:
        address: An address (with or without 0x prefix)
        validate: If True, raises ValueError for invalid addresses.

    Returns:
        Lowercase address with 0x prefix

    Raises:
        ValueError: If validate=True and address is not a valid address
    """
    addr = address.lower()
    if not addr.startswith("0x"):
        addr = "0x" + addr

    if validate and not is_valid_address(addr):
        raise ValueError(f"Invalid address: {address}")

    return addr


def is_valid_address(address: str) -> bool:
    """Check if a string is a 0x-prefixed 20-byte hex address."""
    if not isinstance(address, str):
        return False
    if not address.startswith("0x"):
        return False
    if len(address) != 42:
        return False
    try:
        int(address, 16)
        return True
    except ValueError:
        return False


def is_zero_address(address: str) -> bool:
    """True for the null identity (any casing)."""
    return normalize_address(address) == ZERO_ADDRESS
