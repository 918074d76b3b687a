"""
Wallet management for erdkit.

A wallet wraps one Ed25519 key pair loaded from a key source and provides:
  - Address and public key access
  - Transaction signing (canonical JSON, signed exactly once)
  - Off-chain message signing and verification
  - Export to PEM or to an encrypted keystore
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from erdkit_core.address import Address
from erdkit_core.crypto_utils import SEED_LENGTH, PublicKey, Seed, sign
from erdkit_core.errors import ContractViolation
from erdkit_core.key_reader import KeySource, load_key
from erdkit_core.keystore import DEFAULT_SCRYPT_N, encrypt, save_keystore
from erdkit_core.message import SignedMessage, sign_message, verify_message
from erdkit_core.pem import write_pem
from erdkit_core.transaction import Transaction

logger = logging.getLogger("erdkit_wallet")


class _GeneratedKey(KeySource):
    kind = "generated"


class Wallet:
    """User-facing wallet around a single signing key."""

    def __init__(self, key: KeySource):
        self._key = key

    # ---- factory methods ----

    @classmethod
    def create(cls) -> Wallet:
        """Generate a brand-new wallet from a random seed."""
        return cls(_GeneratedKey(Seed(os.urandom(SEED_LENGTH))))

    @classmethod
    def from_seed(cls, seed: bytes) -> Wallet:
        return cls(_GeneratedKey(Seed(seed)))

    @classmethod
    def from_file(cls, path: str | Path, password: str | None = None) -> Wallet:
        """Load from a ``.pem`` file or, with a password, a ``.json`` keystore."""
        return cls(load_key(path, password))

    # ---- identity ----

    @property
    def address(self) -> Address:
        return self._key.address

    @property
    def public_key(self) -> PublicKey:
        return self._key.public_key

    @property
    def key_source(self) -> str:
        return self._key.kind

    # ---- signing ----

    def sign_transaction(self, tx: Transaction) -> Transaction:
        """
        Sign *tx* in place and return it for chaining.
        The transaction must have been built for this wallet's address.
        """
        if tx.sender != self.address:
            raise ContractViolation(
                f"Transaction sender {tx.sender} is not the wallet address {self.address}"
            )
        tx.apply_signature(sign(self._key.secret_key, tx.serialize_for_signing()))
        logger.info("Signed transaction nonce=%d from %s", tx.nonce, self.address)
        return tx

    def sign_message(self, message: bytes | str) -> SignedMessage:
        return sign_message(self._key.secret_key, self.address, message)

    def verify_message(self, message: bytes | str, signature: bytes) -> bool:
        return verify_message(self.address, message, signature)

    # ---- export ----

    def save_pem(self, path: str | Path) -> Path:
        return write_pem(self._key.seed, path)

    def save_keystore(self, path: str | Path, password: str, n: int = DEFAULT_SCRYPT_N) -> Path:
        record = encrypt(self._key.secret_key, password, n=n)
        return save_keystore(record, path)

    def __repr__(self) -> str:
        return f"Wallet({self.address})"
