"""
Off-chain signed messages.

A message is never signed raw: the signer hashes

    "\\x17Elrond Signed Message:\\n" + str(len(message)) + message

with Keccak-256 and signs the digest, so a signed message can never be
replayed as a transaction.
"""

from __future__ import annotations

from dataclasses import dataclass

from erdkit_core.address import Address
from erdkit_core.crypto_utils import Signature, keccak256, sign, verify

MESSAGE_PREFIX = b"\x17Elrond Signed Message:\n"


def message_digest(message: bytes) -> bytes:
    return keccak256(MESSAGE_PREFIX + str(len(message)).encode("ascii") + message)


@dataclass(frozen=True)
class SignedMessage:
    address: Address
    message: bytes
    signature: Signature

    def verify(self) -> bool:
        return verify(self.signature, message_digest(self.message), self.address.public_key)

    def to_dict(self) -> dict:
        return {
            "address": self.address.bech32,
            "message": self.message.hex(),
            "signature": self.signature.hex(),
        }


def sign_message(secret_key: bytes, address: Address, message: bytes | str) -> SignedMessage:
    if isinstance(message, str):
        message = message.encode("utf-8")
    return SignedMessage(address, message, sign(secret_key, message_digest(message)))


def verify_message(address: Address, message: bytes | str, signature: bytes) -> bool:
    if isinstance(message, str):
        message = message.encode("utf-8")
    return verify(signature, message_digest(message), address.public_key)
