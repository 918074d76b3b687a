#!/usr/bin/env python3
"""
erdkit command-line wallet — loads a key, builds and signs transactions.

Usage:
    python run_wallet.py address --pem wallets/alice.pem
    python run_wallet.py transfer --pem alice.pem \\
                         --receiver erd1... --value 1000000000000000000 --nonce 7
    python run_wallet.py esdt-transfer --keystore alice.json --password ... \\
                         --receiver erd1... --token USDC-c76f1f --amount 1500000 --nonce 8
    python run_wallet.py esdt-issue --pem alice.pem --name Alice --ticker ALC \\
                         --supply 1000000 --decimals 6 --nonce 9 --can-mint
    python run_wallet.py sign-message --pem alice.pem --message hello
    python run_wallet.py verify-message --address erd1... --message hello --signature <hex>

Signed transactions are printed as JSON on stdout, ready for submission.

Environment variables (alternative to flags):
    ERDKIT_PEM_FILE, ERDKIT_KEYSTORE_FILE, ERDKIT_KEYSTORE_PASSWORD,
    ERDKIT_CHAIN_ID, ERDKIT_LOG_LEVEL
"""

from __future__ import annotations

import argparse
import getpass
import json
import logging
import os
import sys

# ---------------------------------------------------------------------------
# Ensure the project root is in sys.path so imports work before pip install
# ---------------------------------------------------------------------------
PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from erdkit_core.account import Account  # noqa: E402
from erdkit_core.address import Address  # noqa: E402
from erdkit_core.codec import hex_to_bytes  # noqa: E402
from erdkit_core.config import ErdkitConfig, load_config  # noqa: E402
from erdkit_core.errors import FormatError, WalletError  # noqa: E402
from erdkit_core.logging_config import setup_logging  # noqa: E402
from erdkit_core.message import verify_message  # noqa: E402
from erdkit_core.token import TokenIssuance, TokenPayment, TokenProperties  # noqa: E402
from erdkit_core.wallet import Wallet  # noqa: E402

logger = logging.getLogger("erdkit_cli")

_PROPERTY_FLAGS = (
    "can_freeze", "can_wipe", "can_pause", "can_mint",
    "can_burn", "can_change_owner", "can_upgrade", "can_add_special_roles",
)


# ===================================================================
#  Argument parsing
# ===================================================================

def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", default=None, help="Path to erdkit.toml config file")
    common.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")

    key = argparse.ArgumentParser(add_help=False)
    key.add_argument("--pem", default=None, help="Plaintext .pem key file")
    key.add_argument("--keystore", default=None, help="Encrypted .json keystore file")
    key.add_argument("--password", default=None,
                     help="Keystore password (or ERDKIT_KEYSTORE_PASSWORD)")

    tx = argparse.ArgumentParser(add_help=False)
    tx.add_argument("--nonce", type=int, required=True, help="Sender account nonce")
    tx.add_argument("--gas-limit", type=int, default=None, help="Override estimated gas limit")
    tx.add_argument("--gas-price", type=int, default=None, help="Override network gas price")

    p = argparse.ArgumentParser(prog="erdkit", description="erdkit wallet tool")
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("address", parents=[common, key], help="Show the account address")

    t = sub.add_parser("transfer", parents=[common, key, tx], help="Sign an EGLD transfer")
    t.add_argument("--receiver", required=True)
    t.add_argument("--value", type=int, required=True, help="Amount in denominated units")
    t.add_argument("--data", default="", help="Optional UTF-8 data payload")

    e = sub.add_parser("esdt-transfer", parents=[common, key, tx], help="Sign a token transfer")
    e.add_argument("--receiver", required=True)
    e.add_argument("--token", required=True, help="Token identifier, e.g. USDC-c76f1f")
    e.add_argument("--amount", type=int, required=True, help="Amount in token units")
    e.add_argument("--token-nonce", type=int, default=0, help="NFT / SFT nonce")

    i = sub.add_parser("esdt-issue", parents=[common, key, tx], help="Sign a token issuance")
    i.add_argument("--name", required=True)
    i.add_argument("--ticker", required=True)
    i.add_argument("--supply", type=int, required=True, help="Initial supply in token units")
    i.add_argument("--decimals", type=int, required=True)
    defaults = TokenProperties()
    for flag in _PROPERTY_FLAGS:
        i.add_argument("--" + flag.replace("_", "-"), dest=flag,
                       action=argparse.BooleanOptionalAction, default=getattr(defaults, flag))

    s = sub.add_parser("sign-message", parents=[common, key], help="Sign an off-chain message")
    s.add_argument("--message", required=True)

    v = sub.add_parser("verify-message", parents=[common], help="Verify a signed message")
    v.add_argument("--address", required=True)
    v.add_argument("--message", required=True)
    v.add_argument("--signature", required=True, help="Hex signature")

    return p


# ===================================================================
#  Command handlers
# ===================================================================

def _load_wallet(args: argparse.Namespace, cfg: ErdkitConfig) -> Wallet:
    pem = args.pem or (None if args.keystore else cfg.wallet.pem_file)
    keystore = args.keystore or (None if args.pem else cfg.wallet.keystore_file)
    if pem:
        return Wallet.from_file(pem)
    if keystore:
        password = args.password or os.environ.get("ERDKIT_KEYSTORE_PASSWORD")
        if password is None:
            password = getpass.getpass("Keystore password: ")
        return Wallet.from_file(keystore, password)
    raise FormatError("No key given: pass --pem or --keystore")


def _account(args: argparse.Namespace, cfg: ErdkitConfig) -> Account:
    return Account(_load_wallet(args, cfg), nonce=args.nonce, network=cfg.network)


def handle_address(args, cfg) -> dict:
    wallet = _load_wallet(args, cfg)
    return {"address": wallet.address.bech32, "publicKey": wallet.public_key.hex()}


def handle_transfer(args, cfg) -> dict:
    tx = _account(args, cfg).send_egld(
        Address.from_bech32(args.receiver),
        args.value,
        data=args.data.encode("utf-8"),
        gas_limit=args.gas_limit,
        gas_price=args.gas_price,
    )
    return tx.to_dict()


def handle_esdt_transfer(args, cfg) -> dict:
    payment = TokenPayment(args.token, args.amount, args.token_nonce)
    tx = _account(args, cfg).send_token(
        Address.from_bech32(args.receiver),
        payment,
        gas_limit=args.gas_limit,
        gas_price=args.gas_price,
    )
    return tx.to_dict()


def handle_esdt_issue(args, cfg) -> dict:
    properties = TokenProperties(**{flag: getattr(args, flag) for flag in _PROPERTY_FLAGS})
    issuance = TokenIssuance(args.name, args.ticker, args.supply, args.decimals, properties)
    tx = _account(args, cfg).issue_token(
        issuance, gas_limit=args.gas_limit, gas_price=args.gas_price,
    )
    return tx.to_dict()


def handle_sign_message(args, cfg) -> dict:
    return _load_wallet(args, cfg).sign_message(args.message).to_dict()


def handle_verify_message(args, cfg) -> dict:
    ok = verify_message(
        Address.from_bech32(args.address), args.message, hex_to_bytes(args.signature),
    )
    return {"valid": ok}


HANDLERS = {
    "address": handle_address,
    "transfer": handle_transfer,
    "esdt-transfer": handle_esdt_transfer,
    "esdt-issue": handle_esdt_issue,
    "sign-message": handle_sign_message,
    "verify-message": handle_verify_message,
}


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        cfg = load_config(args.config)
    except WalletError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    if args.log_level:
        cfg.logging.level = args.log_level.upper()
    setup_logging(cfg.logging.level, cfg.logging.format, cfg.logging.file)

    try:
        result = HANDLERS[args.command](args, cfg)
    except WalletError as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
