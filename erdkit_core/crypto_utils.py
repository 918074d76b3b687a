"""
Ed25519 key derivation, signing and verification for erdkit.

Thin, stateless wrappers over libsodium (via PyNaCl):
  - Seed -> SecretKey expansion and its inverse
  - SecretKey -> PublicKey
  - Detached signatures and their verification
  - Keccak-256 (pycryptodome) for signed-message digests

Key buffers are carried as fixed-length ``bytes`` subclasses whose
constructors reject any other length with ``ContractViolation``.
"""

from __future__ import annotations

from Crypto.Hash import keccak
from nacl import bindings
from nacl.exceptions import BadSignatureError

from erdkit_core.errors import ContractViolation

SEED_LENGTH = bindings.crypto_sign_SEEDBYTES              # 32
SECRET_KEY_LENGTH = bindings.crypto_sign_SECRETKEYBYTES   # 64
PUBLIC_KEY_LENGTH = bindings.crypto_sign_PUBLICKEYBYTES   # 32
SIGNATURE_LENGTH = bindings.crypto_sign_BYTES             # 64


class FixedBytes(bytes):
    """Immutable byte string whose length is checked on construction."""

    LENGTH = 0

    def __new__(cls, value: bytes | bytearray | memoryview):
        raw = bytes(value)
        if len(raw) != cls.LENGTH:
            raise ContractViolation(
                f"{cls.__name__} must be {cls.LENGTH} bytes, got {len(raw)}"
            )
        return super().__new__(cls, raw)

    @classmethod
    def from_hex(cls, value: str):
        return cls(bytes.fromhex(value))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.hex()})"


class Seed(FixedBytes):
    LENGTH = SEED_LENGTH

    def __repr__(self) -> str:
        return "Seed(<redacted>)"


class SecretKey(FixedBytes):
    LENGTH = SECRET_KEY_LENGTH

    def __repr__(self) -> str:
        return "SecretKey(<redacted>)"


class PublicKey(FixedBytes):
    LENGTH = PUBLIC_KEY_LENGTH


class Signature(FixedBytes):
    LENGTH = SIGNATURE_LENGTH


def _as_bytes(message: bytes | str) -> bytes:
    if isinstance(message, str):
        return message.encode("utf-8")
    return bytes(message)


# ---- key derivation ----

def secret_key_from_seed(seed: bytes) -> SecretKey:
    """Deterministically expand a 32-byte seed into a 64-byte secret key."""
    _pk, sk = bindings.crypto_sign_seed_keypair(Seed(seed))
    return SecretKey(sk)


def seed_from_secret_key(secret_key: bytes) -> Seed:
    return Seed(bindings.crypto_sign_ed25519_sk_to_seed(SecretKey(secret_key)))


def public_key_from_secret_key(secret_key: bytes) -> PublicKey:
    return PublicKey(bindings.crypto_sign_ed25519_sk_to_pk(SecretKey(secret_key)))


def public_key_from_seed(seed: bytes) -> PublicKey:
    return public_key_from_secret_key(secret_key_from_seed(seed))


# ---- signatures ----

def sign(secret_key: bytes, message: bytes | str) -> Signature:
    """Produce a deterministic detached Ed25519 signature over *message*."""
    signed = bindings.crypto_sign(_as_bytes(message), SecretKey(secret_key))
    return Signature(signed[:SIGNATURE_LENGTH])


def verify(signature: bytes, message: bytes | str, public_key: bytes) -> bool:
    """
    Return True iff *signature* is a valid signature of *message* under
    *public_key*.  Malformed signatures yield False rather than raising;
    a public key of the wrong length is a ``ContractViolation``.
    """
    pk = PublicKey(public_key)
    sig = bytes(signature)
    if len(sig) != SIGNATURE_LENGTH:
        return False
    try:
        bindings.crypto_sign_open(sig + _as_bytes(message), pk)
    except BadSignatureError:
        return False
    return True


# ---- hashing ----

def keccak256(data: bytes) -> bytes:
    h = keccak.new(digest_bits=256)
    h.update(data)
    return h.digest()
