"""
Hex quantity decoding for JSON-RPC results.

Nodes return integers as 0x-prefixed hex strings. This module turns them into
Python integers and renders wei amounts as exact decimal strings.
"""

import re
from typing import NamedTuple, Optional

WEI_DECIMALS = 18
UINT64_BITS = 64

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]+")


class HexParse(NamedTuple):
    """Result of parsing a hex string. Unparsable input yields (0, False)."""

    value: int
    parsed: bool


def strip_hex_prefix(hex_str: str) -> str:
    """Remove a leading 0x/0X if present."""
    if hex_str[:2] in ("0x", "0X"):
        return hex_str[2:]
    return hex_str


def parse_hex(hex_str: Optional[str], bits: Optional[int] = None) -> HexParse:
    """
    Parse a hex string into an unsigned integer.

    Args:
        hex_str: Hex string, with or without a 0x prefix
        bits: If given, values wider than this many bits are rejected

    Returns:
        HexParse(value, True) on success, HexParse(0, False) otherwise
    """
    if not hex_str:
        return HexParse(0, False)

    digits = strip_hex_prefix(hex_str)
    if not _HEX_DIGITS.fullmatch(digits):
        return HexParse(0, False)

    value = int(digits, 16)
    if bits is not None and value.bit_length() > bits:
        return HexParse(0, False)

    return HexParse(value, True)


def hex_to_uint(hex_str: Optional[str]) -> int:
    """Parse a hex string as a uint64. Non-hex input or overflow returns 0."""
    return parse_hex(hex_str, bits=UINT64_BITS).value


def format_quantity(raw_balance: int, decimals: int) -> str:
    """
    Format balance with full precision, trimming trailing zeros.

    Args:
        raw_balance: Raw balance value (in smallest unit)
        decimals: Number of decimal places

    Returns:
        Formatted balance string with trailing zeros trimmed

    Examples:
        format_quantity(1000000, 6) -> "1"
        format_quantity(1500000, 6) -> "1.5"
        format_quantity(1234567890123456789, 18) -> "1.234567890123456789"
    """
    if raw_balance == 0:
        return "0"

    if decimals == 0:
        return str(raw_balance)

    whole, fraction = divmod(raw_balance, 10**decimals)
    fraction_str = f"{fraction:0{decimals}d}".rstrip("0")

    if not fraction_str:
        return str(whole)

    return f"{whole}.{fraction_str}"


def wei_hex_to_eth(wei_hex: Optional[str]) -> str:
    """
    Convert a wei amount in hex to a decimal string in whole units.

    Examples:
        wei_hex_to_eth("0x1") -> "0.000000000000000001"
        wei_hex_to_eth("0xde0b6b3a7640000") -> "1"
        wei_hex_to_eth("") -> "0"
    """
    if not wei_hex or wei_hex == "0x0":
        return "0"

    return format_quantity(parse_hex(wei_hex).value, WEI_DECIMALS)
