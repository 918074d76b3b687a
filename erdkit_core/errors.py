"""
Error taxonomy for erdkit.

Every recoverable failure raised by the key readers, the keystore pipeline,
the address codec and the transaction builders derives from ``WalletError``
and, where one fits, from the closest builtin exception so that generic
``except ValueError`` handlers keep working.

``ContractViolation`` is intentionally *not* a ``WalletError``: it signals a
caller bug (a buffer of the wrong fixed length handed to a cryptographic
primitive) and should not be swallowed by user-facing error handling.
"""

from __future__ import annotations


class WalletError(Exception):
    """Base class for all recoverable erdkit errors."""


class FileAccessError(WalletError, FileNotFoundError):
    """A key file does not exist or cannot be read."""


class FormatError(WalletError, ValueError):
    """Wrong extension, malformed envelope / record, or empty content."""


class LengthError(WalletError, ValueError):
    """Decoded key material has an unexpected size."""


class IntegrityError(WalletError, ValueError):
    """MAC verification failed while decrypting a keystore (usually a wrong password)."""


class MalformedKeyError(WalletError, ValueError):
    """Key bytes fail a downstream key-derivation invariant."""


class InvalidAddressError(WalletError, ValueError):
    """An address string failed prefix, charset or checksum validation."""


class TransactionBuildError(WalletError, ValueError):
    """A transaction builder received invalid input."""


class ContractViolation(Exception):
    """A cryptographic primitive was called with a buffer of the wrong length."""
