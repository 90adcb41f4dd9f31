"""
EVM address format checks and EIP-55 checksum helpers.
"""

import re

from eth_utils import to_checksum_address

ADDRESS_HEX_LEN = 40

_ADDRESS_RE = re.compile(r"0[xX][0-9a-fA-F]{40}")


def is_valid(address: str) -> bool:
    """Return True for a 0x-prefixed, 40 hex digit address (any case)."""
    return bool(_ADDRESS_RE.fullmatch(address))


def is_zero(address: str) -> bool:
    """Return True for the zero (burn) address."""
    return is_valid(address) and set(address[2:]) == {"0"}


def to_lower(address: str) -> str:
    """Lowercase the hex digits, normalizing the prefix to 0x."""
    return "0x" + address[2:].lower()


def to_checksum(address: str) -> str:
    """
    Convert an address to its EIP-55 mixed-case form.

    Returns:
        Checksummed address, or an empty string if the address is invalid
    """
    if not is_valid(address):
        return ""
    return to_checksum_address(to_lower(address))


def verify_checksum(address: str) -> bool:
    """Return True if the address is valid and already in EIP-55 form."""
    if not is_valid(address):
        return False
    return address == to_checksum(address)
