"""
Account management for erdkit.

High-level account abstraction that combines a wallet, the network
configuration and a locally tracked nonce into convenience methods that
build *and* sign transactions.
"""

from __future__ import annotations

from pathlib import Path

from erdkit_core.address import Address
from erdkit_core.config import NetworkConfig
from erdkit_core.token import TokenIssuance, TokenPayment
from erdkit_core.transaction import Transaction
from erdkit_core.tx_builder import TransactionBuilderInput, TransactionFactory
from erdkit_core.wallet import Wallet


class Account:
    """
    A Wallet plus the nonce it will use for its next transaction.

    The nonce is tracked locally only; it is the caller's job to seed it
    with the on-chain value.
    """

    def __init__(self, wallet: Wallet, nonce: int = 0, network: NetworkConfig | None = None):
        self.wallet = wallet
        self.address: Address = wallet.address
        self.nonce = nonce
        self.factory = TransactionFactory(network)
        self.tx_history: list[Transaction] = []

    @classmethod
    def from_file(cls, path: str | Path, password: str | None = None,
                  nonce: int = 0, network: NetworkConfig | None = None) -> Account:
        return cls(Wallet.from_file(path, password), nonce, network)

    def _input(self, receiver: Address | None, value: int = 0,
               gas_limit: int | None = None, gas_price: int | None = None,
               data: bytes = b"") -> TransactionBuilderInput:
        return TransactionBuilderInput(
            sender=self.address,
            receiver=receiver,
            nonce=self.nonce,
            value=value,
            gas_limit=gas_limit,
            gas_price=gas_price,
            data=data,
        )

    def _sign_and_record(self, tx: Transaction) -> Transaction:
        self.wallet.sign_transaction(tx)
        self.nonce += 1
        self.tx_history.append(tx)
        return tx

    # ---- transaction builders ----

    def send_egld(
        self,
        receiver: Address,
        value: int,
        data: bytes = b"",
        gas_limit: int | None = None,
        gas_price: int | None = None,
    ) -> Transaction:
        """Build and sign a native EGLD transfer."""
        tx_input = self._input(receiver, value, gas_limit, gas_price, data)
        return self._sign_and_record(self.factory.create_egld_transfer(tx_input).build())

    def send_token(
        self,
        receiver: Address,
        payment: TokenPayment,
        gas_limit: int | None = None,
        gas_price: int | None = None,
    ) -> Transaction:
        """Build and sign an ESDT / NFT / SFT transfer."""
        tx_input = self._input(receiver, gas_limit=gas_limit, gas_price=gas_price)
        return self._sign_and_record(self.factory.create_esdt_transfer(tx_input, payment).build())

    def issue_token(
        self,
        issuance: TokenIssuance,
        gas_limit: int | None = None,
        gas_price: int | None = None,
    ) -> Transaction:
        """Build and sign a fungible ESDT issuance."""
        tx_input = self._input(None, gas_limit=gas_limit, gas_price=gas_price)
        return self._sign_and_record(self.factory.create_esdt_issue(tx_input, issuance).build())

    def get_history(self) -> list[dict]:
        """Return transaction history as list of dicts."""
        return [tx.to_dict() for tx in self.tx_history]

    def __repr__(self) -> str:
        return f"Account({self.address}, nonce={self.nonce})"
