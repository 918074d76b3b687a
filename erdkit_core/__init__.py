"""
erdkit - wallet-side key management and transaction signing.

Key features:
- PEM and scrypt / AES-128-CTR encrypted keystore readers
- Ed25519 key derivation, signing and verification (libsodium)
- Bech32 ``erd1...`` address codec
- Builders for EGLD transfers, ESDT / NFT transfers and ESDT issuance
- Canonical JSON transaction serialisation for submission
"""

__version__ = "0.4.0"
__all__ = [
    "errors",
    "codec",
    "crypto_utils",
    "address",
    "keystore",
    "pem",
    "key_reader",
    "transaction",
    "token",
    "tx_builder",
    "message",
    "wallet",
    "account",
    "config",
    "precision",
    "logging_config",
]
