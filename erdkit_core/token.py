"""
Token payments and issuance parameters.

ESDT tokens come in three flavours, distinguished by the token nonce:

  - fungible        nonce == 0, any amount
  - semi-fungible   nonce  > 0, any quantity
  - non-fungible    nonce  > 0, quantity 1

Identifiers look like ``TICKER-1a2b3c``: an upper-case alphanumeric ticker
(3-10 chars), a dash, and six lower-case hex characters.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from erdkit_core.errors import TransactionBuildError
from erdkit_core.precision import NATIVE_TICKER, to_denominated

_IDENTIFIER_RE = re.compile(r"^[A-Z0-9]{3,10}-[0-9a-f]{6}$")
_TICKER_RE = re.compile(r"^[A-Z0-9]{3,10}$")
_NAME_RE = re.compile(r"^[A-Za-z0-9]{3,20}$")

MAX_DECIMALS = 18
MAX_NONCE = 2 ** 64 - 1


def is_valid_identifier(identifier: str) -> bool:
    return bool(_IDENTIFIER_RE.match(identifier))


@dataclass(frozen=True)
class TokenPayment:
    """An amount of a single ESDT token (and nonce, for SFT / NFT)."""
    token_identifier: str
    amount: int
    token_nonce: int = 0

    def __post_init__(self):
        if self.token_identifier == NATIVE_TICKER:
            raise TransactionBuildError("Native EGLD is not an ESDT; use a native transfer")
        if not is_valid_identifier(self.token_identifier):
            raise TransactionBuildError(f"Invalid token identifier: {self.token_identifier!r}")
        if self.amount <= 0:
            raise TransactionBuildError("Token amount must be positive")
        if not 0 <= self.token_nonce <= MAX_NONCE:
            raise TransactionBuildError("Token nonce out of range")

    # ---- constructors ----

    @classmethod
    def fungible_from_integer(cls, identifier: str, amount: int) -> TokenPayment:
        return cls(identifier, amount)

    @classmethod
    def fungible_from_amount(cls, identifier: str, amount: str, decimals: int) -> TokenPayment:
        """``fungible_from_amount("USDC-c76f1f", "1.5", 6)`` -> 1_500_000 units."""
        try:
            units = to_denominated(amount, decimals)
        except ValueError as exc:
            raise TransactionBuildError(str(exc)) from exc
        return cls(identifier, units)

    @classmethod
    def non_fungible(cls, identifier: str, nonce: int) -> TokenPayment:
        return cls(identifier, 1, nonce)

    @classmethod
    def semi_fungible(cls, identifier: str, nonce: int, quantity: int) -> TokenPayment:
        return cls(identifier, quantity, nonce)

    def is_fungible(self) -> bool:
        return self.token_nonce == 0


@dataclass(frozen=True)
class TokenProperties:
    """Feature flags set at issuance, in their on-chain argument order."""
    can_freeze: bool = False
    can_wipe: bool = False
    can_pause: bool = False
    can_mint: bool = False
    can_burn: bool = False
    can_change_owner: bool = False
    can_upgrade: bool = True
    can_add_special_roles: bool = True

    def as_arguments(self) -> list[tuple[str, bool]]:
        return [
            ("canFreeze", self.can_freeze),
            ("canWipe", self.can_wipe),
            ("canPause", self.can_pause),
            ("canMint", self.can_mint),
            ("canBurn", self.can_burn),
            ("canChangeOwner", self.can_change_owner),
            ("canUpgrade", self.can_upgrade),
            ("canAddSpecialRoles", self.can_add_special_roles),
        ]


@dataclass(frozen=True)
class TokenIssuance:
    """Parameters of a fungible ESDT issuance."""
    name: str
    ticker: str
    initial_supply: int
    decimals: int
    properties: TokenProperties = field(default_factory=TokenProperties)

    def __post_init__(self):
        if not _NAME_RE.match(self.name):
            raise TransactionBuildError("Token name must be 3-20 alphanumeric characters")
        if not _TICKER_RE.match(self.ticker):
            raise TransactionBuildError("Ticker must be 3-10 upper-case alphanumeric characters")
        if self.initial_supply < 0:
            raise TransactionBuildError("Initial supply must not be negative")
        if not 0 <= self.decimals <= MAX_DECIMALS:
            raise TransactionBuildError(f"Decimals must be between 0 and {MAX_DECIMALS}")
