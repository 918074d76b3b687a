"""
Transaction builders.

Callers describe *what* they want (``TxKind`` + ``TransactionBuilderInput``
+ an optional ``TokenPayment`` / ``TokenIssuance``) and obtain an abstract
``TransactionBuilder`` from ``TransactionFactory.create_builder``.  The
concrete builders are private to this module.

  - EGLD transfer   value = requested amount, data = caller's (usually empty)
  - ESDT transfer   value = 0, data = ``ESDTTransfer@...`` or ``ESDTNFTTransfer@...``
  - ESDT issue      value = issue cost, receiver = ESDT system contract,
                    data = ``issue@name@ticker@supply@decimals@flag@bool...``

``build()`` never mutates its inputs and is idempotent: every call returns a
fresh, bit-identical unsigned ``Transaction``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from erdkit_core.address import ESDT_SYSTEM_SC_ADDRESS, Address
from erdkit_core.codec import bool_to_hex, int_to_hex, str_to_hex
from erdkit_core.config import NetworkConfig
from erdkit_core.errors import TransactionBuildError
from erdkit_core.token import MAX_NONCE, TokenIssuance, TokenPayment
from erdkit_core.transaction import Transaction

logger = logging.getLogger("erdkit_tx")

ARG_SEPARATOR = "@"
ESDT_TRANSFER_FUNCTION = "ESDTTransfer"
ESDT_NFT_TRANSFER_FUNCTION = "ESDTNFTTransfer"
ESDT_ISSUE_FUNCTION = "issue"


class TxKind(str, Enum):
    EGLD_TRANSFER = "egld_transfer"
    ESDT_TRANSFER = "esdt_transfer"
    ESDT_ISSUE = "esdt_issue"


@dataclass(frozen=True)
class TransactionBuilderInput:
    """
    Common input of every builder.

    ``gas_price``, ``chain_id`` and ``version`` fall back to the network
    configuration when left as None; ``gas_limit`` is estimated when None.
    """
    sender: Address
    nonce: int
    receiver: Address | None = None
    value: int = 0
    gas_price: int | None = None
    gas_limit: int | None = None
    chain_id: str | None = None
    version: int | None = None
    options: int = 0
    data: bytes = b""

    def __post_init__(self):
        if not 0 <= self.nonce <= MAX_NONCE:
            raise TransactionBuildError(f"Nonce must fit in 64 bits, got {self.nonce}")
        if self.value < 0:
            raise TransactionBuildError("Value must not be negative")
        if self.gas_price is not None and self.gas_price <= 0:
            raise TransactionBuildError("Gas price must be positive")
        if self.gas_limit is not None and self.gas_limit <= 0:
            raise TransactionBuildError("Gas limit must be positive")


def join_arguments(function: str, *hex_args: str) -> bytes:
    return ARG_SEPARATOR.join((function, *hex_args)).encode("ascii")


# ===================================================================
#  Builder interface
# ===================================================================

class TransactionBuilder(ABC):
    """Anything that can produce an unsigned ``Transaction``."""

    @abstractmethod
    def build(self) -> Transaction:
        ...


class _BaseBuilder(TransactionBuilder):

    def __init__(self, tx_input: TransactionBuilderInput, network: NetworkConfig):
        self._input = tx_input
        self._network = network

    def _data_movement_gas(self, data: bytes) -> int:
        return self._network.min_gas_limit + self._network.gas_per_data_byte * len(data)

    def _require_receiver(self) -> Address:
        if self._input.receiver is None:
            raise TransactionBuildError("A receiver is required")
        return self._input.receiver

    def _reject_value_and_data(self) -> None:
        if self._input.value:
            raise TransactionBuildError("Token transactions carry no native value")
        if self._input.data:
            raise TransactionBuildError("Token transactions generate their own data field")

    def _make(self, receiver: Address, value: int, data: bytes, estimated_gas: int) -> Transaction:
        inp = self._input
        net = self._network
        tx = Transaction(
            nonce=inp.nonce,
            value=value,
            receiver=receiver,
            sender=inp.sender,
            gas_price=inp.gas_price if inp.gas_price is not None else net.min_gas_price,
            gas_limit=inp.gas_limit if inp.gas_limit is not None else estimated_gas,
            chain_id=inp.chain_id if inp.chain_id is not None else net.chain_id,
            data=data,
            version=inp.version if inp.version is not None else net.tx_version,
            options=inp.options,
        )
        logger.debug("Built %s nonce=%d gas_limit=%d", type(self).__name__, tx.nonce, tx.gas_limit)
        return tx


class _EGLDTransferBuilder(_BaseBuilder):

    def build(self) -> Transaction:
        data = self._input.data
        return self._make(
            self._require_receiver(),
            self._input.value,
            data,
            self._data_movement_gas(data),
        )


class _ESDTTransferBuilder(_BaseBuilder):

    def __init__(self, tx_input: TransactionBuilderInput, network: NetworkConfig,
                 payment: TokenPayment):
        super().__init__(tx_input, network)
        self._payment = payment

    def build(self) -> Transaction:
        self._reject_value_and_data()
        receiver = self._require_receiver()
        payment = self._payment
        net = self._network

        if payment.is_fungible():
            data = join_arguments(
                ESDT_TRANSFER_FUNCTION,
                str_to_hex(payment.token_identifier),
                int_to_hex(payment.amount),
            )
            extra = net.gas_limit_esdt_transfer + net.additional_gas_for_esdt_transfer
            tx_receiver = receiver
        else:
            # NFT / SFT transfers are self-addressed; the real receiver is an argument.
            data = join_arguments(
                ESDT_NFT_TRANSFER_FUNCTION,
                str_to_hex(payment.token_identifier),
                int_to_hex(payment.token_nonce),
                int_to_hex(payment.amount),
                receiver.hex(),
            )
            extra = net.gas_limit_esdt_nft_transfer + net.additional_gas_for_esdt_nft_transfer
            tx_receiver = self._input.sender

        return self._make(tx_receiver, 0, data, self._data_movement_gas(data) + extra)


class _ESDTIssueBuilder(_BaseBuilder):

    def __init__(self, tx_input: TransactionBuilderInput, network: NetworkConfig,
                 issuance: TokenIssuance):
        super().__init__(tx_input, network)
        self._issuance = issuance

    def build(self) -> Transaction:
        self._reject_value_and_data()
        if self._input.receiver is not None and self._input.receiver != ESDT_SYSTEM_SC_ADDRESS:
            raise TransactionBuildError("Issuance must be sent to the ESDT system contract")
        issuance = self._issuance

        args = [
            str_to_hex(issuance.name),
            str_to_hex(issuance.ticker),
            int_to_hex(issuance.initial_supply),
            int_to_hex(issuance.decimals),
        ]
        for name, flag in issuance.properties.as_arguments():
            args.append(str_to_hex(name))
            args.append(bool_to_hex(flag))
        data = join_arguments(ESDT_ISSUE_FUNCTION, *args)

        return self._make(
            ESDT_SYSTEM_SC_ADDRESS,
            self._network.issue_cost,
            data,
            self._data_movement_gas(data) + self._network.gas_limit_issue,
        )


# ===================================================================
#  Factory
# ===================================================================

class TransactionFactory:
    """The only public way to obtain a transaction builder."""

    def __init__(self, network: NetworkConfig | None = None):
        self.network = network or NetworkConfig()

    def create_builder(
        self,
        kind: TxKind | str,
        tx_input: TransactionBuilderInput,
        payment: TokenPayment | None = None,
        issuance: TokenIssuance | None = None,
    ) -> TransactionBuilder:
        try:
            kind = TxKind(kind)
        except ValueError as exc:
            raise TransactionBuildError(f"Unknown transaction kind: {kind!r}") from exc

        if kind is TxKind.EGLD_TRANSFER:
            return _EGLDTransferBuilder(tx_input, self.network)
        if kind is TxKind.ESDT_TRANSFER:
            if payment is None:
                raise TransactionBuildError("ESDT transfer requires a token payment")
            return _ESDTTransferBuilder(tx_input, self.network, payment)
        if issuance is None:
            raise TransactionBuildError("ESDT issuance requires issuance parameters")
        return _ESDTIssueBuilder(tx_input, self.network, issuance)

    # ---- convenience ----

    def create_egld_transfer(self, tx_input: TransactionBuilderInput) -> TransactionBuilder:
        return self.create_builder(TxKind.EGLD_TRANSFER, tx_input)

    def create_esdt_transfer(self, tx_input: TransactionBuilderInput,
                             payment: TokenPayment) -> TransactionBuilder:
        return self.create_builder(TxKind.ESDT_TRANSFER, tx_input, payment=payment)

    def create_esdt_issue(self, tx_input: TransactionBuilderInput,
                          issuance: TokenIssuance) -> TransactionBuilder:
        return self.create_builder(TxKind.ESDT_ISSUE, tx_input, issuance=issuance)
