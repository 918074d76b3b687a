"""
Password-encrypted keystore pipeline.

A keystore wraps a 64-byte Ed25519 secret key:

    derived  = scrypt(password, salt, n, r, p, dklen=32)
    enc_key  = derived[:16]          # AES-128-CTR key
    mac_key  = derived[16:32]        # HMAC-SHA256 key
    mac      = HMAC-SHA256(mac_key, ciphertext)

Decryption checks the MAC (constant-time) *before* touching the
ciphertext; a mismatch raises ``IntegrityError`` and nothing is
decrypted.  The JSON layout follows the version-4 wallet keystore:

    {
      "version": 4, "kind": "secretKey", "id": "<uuid>",
      "address": "<hex public key>", "bech32": "erd1...",
      "crypto": {
        "ciphertext": "<hex>", "cipherparams": {"iv": "<hex>"},
        "cipher": "aes-128-ctr", "kdf": "scrypt",
        "kdfparams": {"dklen": 32, "salt": "<hex>", "n": 4096, "r": 8, "p": 1},
        "mac": "<hex>"
      }
    }
"""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from Crypto.Cipher import AES
from Crypto.Protocol.KDF import scrypt

from erdkit_core.address import Address
from erdkit_core.codec import hex_to_bytes
from erdkit_core.crypto_utils import (
    SECRET_KEY_LENGTH,
    SEED_LENGTH,
    SecretKey,
    public_key_from_secret_key,
    public_key_from_seed,
)
from erdkit_core.errors import FormatError, IntegrityError, MalformedKeyError

logger = logging.getLogger("erdkit_keystore")

KEYSTORE_VERSION = 4
KEYSTORE_KIND = "secretKey"
CIPHER_NAME = "aes-128-ctr"
KDF_NAME = "scrypt"

DERIVED_KEY_LENGTH = 32
AES_KEY_LENGTH = 16
IV_LENGTH = 16
MAC_LENGTH = 32

# Defaults used when creating new keystores.
DEFAULT_SCRYPT_N = 4096
DEFAULT_SCRYPT_R = 8
DEFAULT_SCRYPT_P = 1
DEFAULT_SALT_LENGTH = 32


@dataclass(frozen=True)
class KdfParams:
    """scrypt cost parameters."""
    salt: bytes
    n: int = DEFAULT_SCRYPT_N
    r: int = DEFAULT_SCRYPT_R
    p: int = DEFAULT_SCRYPT_P
    dklen: int = DERIVED_KEY_LENGTH

    def __post_init__(self):
        for name in ("n", "r", "p"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise FormatError(f"scrypt parameter {name} must be a positive integer")
        if self.dklen != DERIVED_KEY_LENGTH:
            raise FormatError(
                f"dklen must be {DERIVED_KEY_LENGTH} (AES-128 key + MAC key), got {self.dklen}"
            )
        if not self.salt:
            raise FormatError("scrypt salt must not be empty")

    def to_dict(self) -> dict:
        return {
            "dklen": self.dklen,
            "salt": self.salt.hex(),
            "n": self.n,
            "r": self.r,
            "p": self.p,
        }


@dataclass(frozen=True)
class EncryptedKeyRecord:
    """Parsed contents of a keystore file."""
    kdf_params: KdfParams
    iv: bytes
    ciphertext: bytes
    mac: bytes
    version: int = KEYSTORE_VERSION
    address_hex: str = ""       # declared public key, hex
    bech32: str = ""            # declared address
    id: str = ""

    def __post_init__(self):
        if len(self.iv) != IV_LENGTH:
            raise FormatError(f"iv must be {IV_LENGTH} bytes, got {len(self.iv)}")
        if len(self.mac) != MAC_LENGTH:
            raise FormatError(f"mac must be {MAC_LENGTH} bytes, got {len(self.mac)}")
        if not self.ciphertext:
            raise FormatError("ciphertext must not be empty")

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "kind": KEYSTORE_KIND,
            "id": self.id,
            "address": self.address_hex,
            "bech32": self.bech32,
            "crypto": {
                "ciphertext": self.ciphertext.hex(),
                "cipherparams": {"iv": self.iv.hex()},
                "cipher": CIPHER_NAME,
                "kdf": KDF_NAME,
                "kdfparams": self.kdf_params.to_dict(),
                "mac": self.mac.hex(),
            },
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=4)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EncryptedKeyRecord:
        """Validate and parse a keystore dict.  Raises ``FormatError``."""
        if not isinstance(data, dict):
            raise FormatError("Keystore must be a JSON object")
        kind = data.get("kind", KEYSTORE_KIND)
        if kind != KEYSTORE_KIND:
            raise FormatError(f"Unsupported keystore kind: {kind!r}")
        try:
            crypto = data["crypto"]
            cipher = crypto["cipher"]
            kdf = crypto["kdf"]
            raw_params = crypto["kdfparams"]
            iv = hex_to_bytes(crypto["cipherparams"]["iv"])
            ciphertext = hex_to_bytes(crypto["ciphertext"])
            mac = hex_to_bytes(crypto["mac"])
            params = KdfParams(
                salt=hex_to_bytes(raw_params["salt"]),
                n=raw_params["n"],
                r=raw_params["r"],
                p=raw_params["p"],
                dklen=raw_params["dklen"],
            )
        except (KeyError, TypeError, AttributeError) as exc:
            raise FormatError(f"Keystore is missing or has a malformed field {exc}") from exc
        if cipher != CIPHER_NAME:
            raise FormatError(f"Unsupported cipher: {cipher!r}")
        if kdf != KDF_NAME:
            raise FormatError(f"Unsupported kdf: {kdf!r}")
        version = data.get("version", KEYSTORE_VERSION)
        if type(version) is not int or version != KEYSTORE_VERSION:
            raise FormatError(f"Unsupported keystore version: {version!r}")
        text_fields = {}
        for name in ("address", "bech32", "id"):
            value = data.get(name) or ""
            if not isinstance(value, str):
                raise FormatError(f"Keystore field {name!r} must be a string")
            text_fields[name] = value
        return cls(
            kdf_params=params,
            iv=iv,
            ciphertext=ciphertext,
            mac=mac,
            version=version,
            address_hex=text_fields["address"],
            bech32=text_fields["bech32"],
            id=text_fields["id"],
        )

    @classmethod
    def from_json(cls, text: str) -> EncryptedKeyRecord:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise FormatError(f"Keystore is not valid JSON: {exc}") from exc
        return cls.from_dict(data)


# ---- primitives ----

def derive_key(password: str | bytes, params: KdfParams) -> bytes:
    """Run scrypt with the record's cost parameters."""
    if isinstance(password, str):
        password = password.encode("utf-8")
    try:
        return scrypt(password, params.salt, params.dklen, N=params.n, r=params.r, p=params.p)
    except ValueError as exc:
        raise FormatError(f"Invalid scrypt parameters: {exc}") from exc


def compute_mac(mac_key: bytes, ciphertext: bytes) -> bytes:
    return hmac.new(mac_key, ciphertext, hashlib.sha256).digest()


def _aes_ctr(key: bytes, iv: bytes, data: bytes) -> bytes:
    # The iv is the full 128-bit initial counter block.
    cipher = AES.new(key, AES.MODE_CTR, nonce=b"", initial_value=iv)
    return cipher.encrypt(data)


# ---- pipeline ----

def decrypt(password: str | bytes, record: EncryptedKeyRecord) -> SecretKey:
    """
    Recover the secret key from *record*.

    Raises
    ------
    IntegrityError
        The MAC does not match (wrong password or tampered file).
    MalformedKeyError
        The plaintext is not a well-formed 64-byte Ed25519 secret key.
    """
    derived = derive_key(password, record.kdf_params)
    enc_key = derived[:AES_KEY_LENGTH]
    mac_key = derived[AES_KEY_LENGTH:DERIVED_KEY_LENGTH]

    expected = compute_mac(mac_key, record.ciphertext)
    if not hmac.compare_digest(expected, record.mac):
        logger.warning("Keystore MAC mismatch (id=%s)", record.id or "-")
        raise IntegrityError("Keystore MAC mismatch: wrong password or corrupted file")

    plaintext = _aes_ctr(enc_key, record.iv, record.ciphertext)
    if len(plaintext) != SECRET_KEY_LENGTH:
        raise MalformedKeyError(
            f"Decrypted key must be {SECRET_KEY_LENGTH} bytes, got {len(plaintext)}"
        )
    if public_key_from_seed(plaintext[:SEED_LENGTH]) != plaintext[SEED_LENGTH:]:
        raise MalformedKeyError("Decrypted key halves are inconsistent")
    return SecretKey(plaintext)


def encrypt(
    secret_key: bytes,
    password: str | bytes,
    n: int = DEFAULT_SCRYPT_N,
    r: int = DEFAULT_SCRYPT_R,
    p: int = DEFAULT_SCRYPT_P,
    salt: bytes | None = None,
    iv: bytes | None = None,
    key_id: str | None = None,
) -> EncryptedKeyRecord:
    """Encrypt a 64-byte secret key into a new keystore record."""
    sk = SecretKey(secret_key)
    params = KdfParams(salt=salt or os.urandom(DEFAULT_SALT_LENGTH), n=n, r=r, p=p)
    iv = iv or os.urandom(IV_LENGTH)

    derived = derive_key(password, params)
    ciphertext = _aes_ctr(derived[:AES_KEY_LENGTH], iv, sk)
    mac = compute_mac(derived[AES_KEY_LENGTH:DERIVED_KEY_LENGTH], ciphertext)
    address = Address(public_key_from_secret_key(sk))

    return EncryptedKeyRecord(
        kdf_params=params,
        iv=iv,
        ciphertext=ciphertext,
        mac=mac,
        address_hex=address.hex(),
        bech32=address.bech32,
        id=key_id or str(uuid.uuid4()),
    )


def save_keystore(record: EncryptedKeyRecord, path: str | Path) -> Path:
    """Write *record* as JSON to *path* (parents created as needed)."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(record.to_json(), encoding="utf-8")
    logger.info("Keystore written: %s (%s)", p, record.bech32)
    return p
