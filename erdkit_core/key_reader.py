"""
Key source readers.

Two readers turn a file on disk into the same ``(seed, public key,
address)`` triple:

  - ``PemKeySource.from_file(path)``                 plaintext ``.pem`` envelope
  - ``KeystoreKeySource.from_file(path, password)``  encrypted JSON keystore

Both are fallible factories: they either return a fully validated key
source or raise a specific ``WalletError`` subclass.  No partially
populated object is ever returned.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from erdkit_core.address import Address
from erdkit_core.crypto_utils import (
    PUBLIC_KEY_LENGTH,
    SEED_LENGTH,
    PublicKey,
    Seed,
    SecretKey,
    public_key_from_seed,
    secret_key_from_seed,
    seed_from_secret_key,
)
from erdkit_core.errors import (
    FileAccessError,
    FormatError,
    InvalidAddressError,
    LengthError,
    MalformedKeyError,
)
from erdkit_core.keystore import EncryptedKeyRecord, decrypt
from erdkit_core.pem import PEM_EXTENSION, decode_payload, extract_payload

logger = logging.getLogger("erdkit_keys")

KEYSTORE_EXTENSION = ".json"


def _read_text(path: Path, extension: str) -> str:
    if not path.is_file():
        raise FileAccessError(f"Key file does not exist: {path}")
    if path.suffix.lower() != extension:
        raise FormatError(f"Key file must have a {extension} extension: {path}")
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise FormatError(f"Key file is not valid text: {path}") from exc
    except OSError as exc:
        raise FileAccessError(f"Cannot read key file {path}: {exc}") from exc


class KeySource(ABC):
    """A loaded signing identity."""

    def __init__(self, seed: Seed, path: Path | None = None):
        self._seed = Seed(seed)
        self._public_key = public_key_from_seed(self._seed)
        self._address = Address(self._public_key)
        self.path = path

    @property
    @abstractmethod
    def kind(self) -> str:
        """Short name of the file format the key came from."""

    @property
    def seed(self) -> Seed:
        return self._seed

    @property
    def secret_key(self) -> SecretKey:
        return secret_key_from_seed(self._seed)

    @property
    def public_key(self) -> PublicKey:
        return self._public_key

    @property
    def address(self) -> Address:
        return self._address

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._address.bech32})"


class PemKeySource(KeySource):
    """Key loaded from a plaintext PEM envelope."""

    kind = "pem"

    @classmethod
    def from_file(cls, path: str | Path) -> PemKeySource:
        p = Path(path)
        payload = extract_payload(_read_text(p, PEM_EXTENSION))
        if not payload:
            raise FormatError(f"Key file is empty: {p}")
        return cls.from_key_bytes(decode_payload(payload), p)

    @classmethod
    def from_key_bytes(cls, key_bytes: bytes, path: Path | None = None) -> PemKeySource:
        """Validate ``seed || public key`` bytes decoded from an envelope."""
        expected = SEED_LENGTH + PUBLIC_KEY_LENGTH
        if len(key_bytes) != expected:
            raise LengthError(
                f"Decoded key must be {expected} bytes, got {len(key_bytes)}"
            )
        source = cls(Seed(key_bytes[:SEED_LENGTH]), path)
        if source.public_key != key_bytes[SEED_LENGTH:]:
            raise MalformedKeyError("Embedded public key does not match the seed")
        logger.debug("Loaded PEM key %s from %s", source.address, path)
        return source


class KeystoreKeySource(KeySource):
    """Key recovered from a password-encrypted keystore."""

    kind = "keystore"

    @classmethod
    def from_file(cls, path: str | Path, password: str) -> KeystoreKeySource:
        p = Path(path)
        text = _read_text(p, KEYSTORE_EXTENSION)
        if not text.strip():
            raise FormatError(f"Key file is empty: {p}")
        return cls.from_record(EncryptedKeyRecord.from_json(text), password, p)

    @classmethod
    def from_record(
        cls,
        record: EncryptedKeyRecord,
        password: str,
        path: Path | None = None,
    ) -> KeystoreKeySource:
        secret_key = decrypt(password, record)
        source = cls(seed_from_secret_key(secret_key), path)
        if record.bech32 and record.bech32 != source.address.bech32:
            raise InvalidAddressError(
                f"Keystore declares {record.bech32} but the key derives {source.address.bech32}"
            )
        if record.address_hex and record.address_hex.lower() != source.address.hex():
            raise InvalidAddressError("Keystore public key does not match the decrypted key")
        logger.debug("Unlocked keystore %s (%s)", record.id or "-", source.address)
        return source


def load_pem_key(path: str | Path) -> PemKeySource:
    return PemKeySource.from_file(path)


def load_keystore_key(path: str | Path, password: str) -> KeystoreKeySource:
    return KeystoreKeySource.from_file(path, password)


def load_key(path: str | Path, password: str | None = None) -> KeySource:
    """Pick the reader from the file extension."""
    p = Path(path)
    if p.suffix.lower() == KEYSTORE_EXTENSION:
        if password is None:
            raise FormatError("A password is required to unlock a keystore")
        return load_keystore_key(p, password)
    return load_pem_key(p)
