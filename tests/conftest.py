"""
Shared pytest fixtures for the erdkit test suite.
"""

from pathlib import Path

import pytest

from erdkit_core.address import Address
from erdkit_core.config import NetworkConfig
from erdkit_core.crypto_utils import secret_key_from_seed
from erdkit_core.keystore import encrypt, save_keystore
from erdkit_core.wallet import Wallet

DATA_DIR = Path(__file__).parent / "data"

ALICE_SEED = "413f42575f7f26fad3317a778771212fdb80245850981e48b58a4f25e344e8f9"
ALICE_PUBKEY = "0139472eff6886771a982f3083da5d421f24c29181e63888228dc81ca60d69e1"
ALICE_ADDRESS = "erd1qyu5wthldzr8wx5c9ucg8kjagg0jfs53s8nr3zpz3hypefsdd8ssycr6th"

BOB_SEED = "b8ca6f8203fb4b545a8e83c5384da033c415db155b53fb5b8eba7ff5a039d639"
BOB_PUBKEY = "8049d639e5a6980d1cd2392abcce41029cda74a1563523a202f09641cc2618f8"
BOB_ADDRESS = "erd1spyavw0956vq68xj8y4tenjpq2wd5a9p2c6j8gsz7ztyrnpxrruqzu66jx"

CAROL_SEED = "e253a571ca153dc2aee845819f74bcc9773b0586edead15a94cb7235a5027436"
CAROL_PUBKEY = "b2a11555ce521e4944e09ab17549d85b487dcd26c84b5017a39e31a3670889ba"
CAROL_ADDRESS = "erd1k2s324ww2g0yj38qn2ch2jwctdy8mnfxep94q9arncc6xecg3xaq6mjse8"

KEYSTORE_PASSWORD = "12345678Qq!"
# Cheap scrypt cost so the suite stays fast.
TEST_SCRYPT_N = 1024


@pytest.fixture
def data_dir():
    return DATA_DIR


@pytest.fixture
def alice_wallet():
    """Deterministic wallet for Alice."""
    return Wallet.from_seed(bytes.fromhex(ALICE_SEED))


@pytest.fixture
def bob_address():
    return Address.from_bech32(BOB_ADDRESS)


@pytest.fixture
def network():
    return NetworkConfig(chain_id="T")


@pytest.fixture
def alice_keystore(tmp_path):
    """Alice's key in an encrypted keystore file."""
    record = encrypt(
        secret_key_from_seed(bytes.fromhex(ALICE_SEED)),
        KEYSTORE_PASSWORD,
        n=TEST_SCRYPT_N,
    )
    return save_keystore(record, tmp_path / "alice.json")
