"""Parsing of user-entered memory addresses."""

from __future__ import annotations

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_ADDRESS_LIMIT = 1 << 64


def parse_address(addr: str) -> int:
    """Parse a hexadecimal address, with or without a leading ``0x``.

    Raises ValueError if the text is not a valid 64-bit hexadecimal number.
    """
    digits = addr.removeprefix("0x")
    if digits.startswith("+"):
        digits = digits[1:]
    if not digits or not set(digits) <= _HEX_DIGITS:
        raise ValueError(f"invalid address: {addr!r}")
    value = int(digits, 16)
    if value >= _ADDRESS_LIMIT:
        raise ValueError(f"address out of range: {addr!r}")
    return value