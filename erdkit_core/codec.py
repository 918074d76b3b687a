"""
Codec helpers shared by the key readers, the address codec and the
transaction builders.

All helpers are strict: malformed input raises ``FormatError`` instead of
being silently repaired.
"""

from __future__ import annotations

import base64
import binascii

from erdkit_core.errors import FormatError


def bytes_to_hex(data: bytes) -> str:
    return data.hex()


def hex_to_bytes(value: str) -> bytes:
    """Decode a hex string (optionally ``0x``-prefixed) into bytes."""
    if value.startswith(("0x", "0X")):
        value = value[2:]
    try:
        return bytes.fromhex(value)
    except ValueError as exc:
        raise FormatError(f"Invalid hex string: {exc}") from exc


def b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def b64decode(value: str | bytes) -> bytes:
    """Decode standard base64, rejecting characters outside the alphabet."""
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise FormatError(f"Invalid base64 payload: {exc}") from exc


def str_to_hex(value: str) -> str:
    """UTF-8 encode *value* and return its hex form."""
    return value.encode("utf-8").hex()


def int_to_hex(value: int) -> str:
    """
    Encode a non-negative integer as big-endian hex with an even number of
    digits.  Zero encodes as ``"00"``.

    >>> int_to_hex(10)
    '0a'
    >>> int_to_hex(256)
    '0100'
    """
    if value < 0:
        raise ValueError("Cannot hex-encode a negative integer")
    digits = format(value, "x")
    if len(digits) % 2:
        digits = "0" + digits
    return digits


def hex_to_int(value: str) -> int:
    if not value:
        return 0
    try:
        return int(value, 16)
    except ValueError as exc:
        raise FormatError(f"Invalid hex integer: {value!r}") from exc


def bool_to_hex(flag: bool) -> str:
    return str_to_hex("true" if flag else "false")
