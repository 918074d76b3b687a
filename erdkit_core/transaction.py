"""
Canonical transaction record.

A ``Transaction`` is produced by a builder (see ``tx_builder``), signed
exactly once by a ``Wallet``, then handed to whatever submits it to the
network.  Its wire form is compact JSON with a fixed key order:

    nonce, value, receiver, sender, gasPrice, gasLimit,
    data, chainID, version, options, signature

``value`` is a decimal string, ``data`` is base64 and omitted when empty,
``options`` is omitted when zero and ``signature`` is lower-case hex.  The
bytes that get signed are the same JSON without the signature.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from erdkit_core.address import Address
from erdkit_core.codec import b64decode, b64encode, hex_to_bytes
from erdkit_core.crypto_utils import SIGNATURE_LENGTH, Signature, verify
from erdkit_core.errors import ContractViolation, FormatError, WalletError

TX_VERSION = 1


@dataclass(frozen=True)
class Transaction:
    """An immutable transaction; only ``signature`` is filled in later."""
    nonce: int
    value: int
    receiver: Address
    sender: Address
    gas_price: int
    gas_limit: int
    chain_id: str
    data: bytes = b""
    version: int = TX_VERSION
    options: int = 0
    signature: bytes = field(default=b"", compare=False)

    # ---- signing ----

    @property
    def is_signed(self) -> bool:
        return bool(self.signature)

    def apply_signature(self, signature: bytes) -> Transaction:
        """Attach the 64-byte signature.  A transaction can be signed only once."""
        if self.signature:
            raise ContractViolation("Transaction is already signed")
        object.__setattr__(self, "signature", bytes(Signature(signature)))
        return self

    def verify_signature(self) -> bool:
        if not self.signature:
            return False
        return verify(self.signature, self.serialize_for_signing(), self.sender.public_key)

    # ---- serialisation ----

    def to_dict(self, include_signature: bool = True) -> dict[str, Any]:
        d: dict[str, Any] = {
            "nonce": self.nonce,
            "value": str(self.value),
            "receiver": self.receiver.bech32,
            "sender": self.sender.bech32,
            "gasPrice": self.gas_price,
            "gasLimit": self.gas_limit,
        }
        if self.data:
            d["data"] = b64encode(self.data)
        d["chainID"] = self.chain_id
        d["version"] = self.version
        if self.options:
            d["options"] = self.options
        if include_signature and self.signature:
            d["signature"] = self.signature.hex()
        return d

    def serialize_for_signing(self) -> bytes:
        """The exact bytes covered by the signature."""
        return json.dumps(
            self.to_dict(include_signature=False), separators=(",", ":")
        ).encode("utf-8")

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Transaction:
        try:
            tx = cls(
                nonce=int(d["nonce"]),
                value=int(d["value"]),
                receiver=Address.from_bech32(d["receiver"]),
                sender=Address.from_bech32(d["sender"]),
                gas_price=int(d["gasPrice"]),
                gas_limit=int(d["gasLimit"]),
                chain_id=str(d["chainID"]),
                data=b64decode(d["data"]) if d.get("data") else b"",
                version=int(d.get("version", TX_VERSION)),
                options=int(d.get("options", 0)),
            )
        except (KeyError, TypeError, ValueError) as exc:
            if isinstance(exc, WalletError):
                raise
            raise FormatError(f"Malformed transaction record: {exc}") from exc
        if d.get("signature"):
            signature = hex_to_bytes(d["signature"])
            if len(signature) != SIGNATURE_LENGTH:
                raise FormatError(f"Signature must be {SIGNATURE_LENGTH} bytes")
            tx.apply_signature(signature)
        return tx

    def __repr__(self) -> str:
        state = "signed" if self.signature else "unsigned"
        return (
            f"Transaction(nonce={self.nonce}, value={self.value}, "
            f"{self.sender} -> {self.receiver}, {state})"
        )
