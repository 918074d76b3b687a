"""
Bech32 address codec.

An account address is the 32-byte Ed25519 public key rendered as a BIP-173
Bech32 string with the ``erd`` human-readable prefix, e.g.::

    erd1qyu5wthldzr8wx5c9ucg8kjagg0jfs53s8nr3zpz3hypefsdd8ssycr6th

Decoding verifies the prefix, the character set, case consistency, the
checksum and the payload length; any failure raises ``InvalidAddressError``.
"""

from __future__ import annotations

import bech32

from erdkit_core.crypto_utils import PUBLIC_KEY_LENGTH, PublicKey
from erdkit_core.errors import InvalidAddressError

HRP = "erd"


def bech32_encode(hrp: str, payload: bytes) -> str:
    data = bech32.convertbits(payload, 8, 5)
    return bech32.bech32_encode(hrp, data)


def bech32_decode(value: str) -> tuple[str, bytes]:
    """Split a Bech32 string into ``(hrp, payload bytes)`` after full validation."""
    hrp, data = bech32.bech32_decode(value)
    if hrp is None:
        # length, case, separator, charset or checksum failure
        raise InvalidAddressError(f"Not a valid Bech32 address: {value!r}")
    payload = bech32.convertbits(data, 5, 8, False)
    if payload is None:
        raise InvalidAddressError("Invalid padding in address payload")
    return hrp, bytes(payload)


def encode_address(public_key: bytes, hrp: str = HRP) -> str:
    return bech32_encode(hrp, PublicKey(public_key))


def decode_address(value: str, hrp: str = HRP) -> PublicKey:
    """Decode an ``erd1...`` string back into the 32-byte public key."""
    found_hrp, payload = bech32_decode(value)
    if found_hrp != hrp:
        raise InvalidAddressError(f"Expected prefix {hrp!r}, got {found_hrp!r}")
    if len(payload) != PUBLIC_KEY_LENGTH:
        raise InvalidAddressError(
            f"Address payload must be {PUBLIC_KEY_LENGTH} bytes, got {len(payload)}"
        )
    return PublicKey(payload)


class Address:
    """An account address: a public key plus its cached Bech32 form."""

    __slots__ = ("_public_key", "_bech32")

    def __init__(self, public_key: bytes):
        self._public_key = PublicKey(public_key)
        self._bech32 = encode_address(self._public_key)

    @classmethod
    def from_bech32(cls, value: str) -> Address:
        return cls(decode_address(value))

    @classmethod
    def from_hex(cls, value: str) -> Address:
        return cls(PublicKey.from_hex(value))

    @classmethod
    def zero(cls) -> Address:
        return cls(bytes(PUBLIC_KEY_LENGTH))

    @property
    def public_key(self) -> PublicKey:
        return self._public_key

    @property
    def bech32(self) -> str:
        return self._bech32

    def hex(self) -> str:
        return self._public_key.hex()

    def is_smart_contract(self) -> bool:
        # Contract addresses start with eight zero bytes.
        return self._public_key[:8] == bytes(8)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Address):
            return NotImplemented
        return self._public_key == other._public_key

    def __hash__(self) -> int:
        return hash(bytes(self._public_key))

    def __str__(self) -> str:
        return self._bech32

    def __repr__(self) -> str:
        return f"Address({self._bech32})"


# Built-in ESDT system smart contract that handles token issuance.
ESDT_SYSTEM_SC_ADDRESS = Address.from_hex(
    "000000000000000000010000000000000000000000000000000000000002ffff"
)
