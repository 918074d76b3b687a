"""
Test suite for erdkit_core.crypto_utils (Ed25519 engine).

Covers:
  - Seed <-> secret key expansion
  - Public key derivation (known vectors)
  - Deterministic signing and verification
  - Malformed signatures and wrong-length buffers
  - Keccak-256
"""

import unittest

from erdkit_core.crypto_utils import (
    PublicKey,
    Seed,
    SecretKey,
    Signature,
    keccak256,
    public_key_from_secret_key,
    public_key_from_seed,
    secret_key_from_seed,
    seed_from_secret_key,
    sign,
    verify,
)
from erdkit_core.errors import ContractViolation, WalletError

from conftest import ALICE_PUBKEY, ALICE_SEED, BOB_PUBKEY, BOB_SEED, CAROL_PUBKEY, CAROL_SEED


class TestKeyDerivation(unittest.TestCase):

    def test_known_vectors(self):
        for seed, pub in [
            (ALICE_SEED, ALICE_PUBKEY),
            (BOB_SEED, BOB_PUBKEY),
            (CAROL_SEED, CAROL_PUBKEY),
        ]:
            with self.subTest(seed=seed[:8]):
                sk = secret_key_from_seed(bytes.fromhex(seed))
                self.assertEqual(public_key_from_secret_key(sk).hex(), pub)

    def test_secret_key_layout_is_seed_then_public_key(self):
        sk = secret_key_from_seed(bytes.fromhex(ALICE_SEED))
        self.assertEqual(len(sk), 64)
        self.assertEqual(sk[:32].hex(), ALICE_SEED)
        self.assertEqual(sk[32:].hex(), ALICE_PUBKEY)

    def test_seed_from_secret_key_inverts_expansion(self):
        seed = bytes.fromhex(BOB_SEED)
        self.assertEqual(seed_from_secret_key(secret_key_from_seed(seed)), seed)

    def test_derivation_is_stable(self):
        seed = bytes.fromhex(CAROL_SEED)
        first = public_key_from_secret_key(secret_key_from_seed(seed))
        second = public_key_from_secret_key(secret_key_from_seed(seed))
        self.assertEqual(first, second)

    def test_public_key_from_seed_shortcut(self):
        self.assertEqual(public_key_from_seed(bytes.fromhex(ALICE_SEED)).hex(), ALICE_PUBKEY)

    def test_returned_types(self):
        sk = secret_key_from_seed(bytes.fromhex(ALICE_SEED))
        self.assertIsInstance(sk, SecretKey)
        self.assertIsInstance(public_key_from_secret_key(sk), PublicKey)
        self.assertIsInstance(seed_from_secret_key(sk), Seed)


class TestSigning(unittest.TestCase):

    def setUp(self):
        self.sk = secret_key_from_seed(bytes.fromhex(ALICE_SEED))
        self.pk = public_key_from_secret_key(self.sk)

    def test_signature_is_64_bytes(self):
        sig = sign(self.sk, b"hello")
        self.assertIsInstance(sig, Signature)
        self.assertEqual(len(sig), 64)

    def test_signature_deterministic(self):
        self.assertEqual(sign(self.sk, b"payload"), sign(self.sk, b"payload"))

    def test_sign_then_verify(self):
        for message in (b"", b"hello", bytes(range(256)), "unicode é"):
            with self.subTest(message=message[:10]):
                self.assertTrue(verify(sign(self.sk, message), message, self.pk))

    def test_wrong_message_fails(self):
        sig = sign(self.sk, b"original")
        self.assertFalse(verify(sig, b"tampered", self.pk))

    def test_wrong_public_key_fails(self):
        sig = sign(self.sk, b"msg")
        other = public_key_from_seed(bytes.fromhex(BOB_SEED))
        self.assertFalse(verify(sig, b"msg", other))

    def test_flipped_signature_bit_fails(self):
        sig = bytearray(sign(self.sk, b"msg"))
        sig[0] ^= 0x01
        self.assertFalse(verify(bytes(sig), b"msg", self.pk))

    def test_malformed_signature_returns_false(self):
        self.assertFalse(verify(b"", b"msg", self.pk))
        self.assertFalse(verify(b"\x00" * 10, b"msg", self.pk))
        self.assertFalse(verify(b"\xff" * 64, b"msg", self.pk))


class TestFixedLengths(unittest.TestCase):

    def test_seed_wrong_length(self):
        with self.assertRaises(ContractViolation):
            secret_key_from_seed(b"\x01" * 31)

    def test_secret_key_wrong_length(self):
        with self.assertRaises(ContractViolation):
            sign(b"\x01" * 32, b"msg")
        with self.assertRaises(ContractViolation):
            public_key_from_secret_key(b"\x01" * 63)

    def test_public_key_wrong_length(self):
        sk = secret_key_from_seed(bytes.fromhex(ALICE_SEED))
        with self.assertRaises(ContractViolation):
            verify(sign(sk, b"m"), b"m", b"\x01" * 33)

    def test_contract_violation_is_not_a_wallet_error(self):
        self.assertFalse(issubclass(ContractViolation, WalletError))

    def test_secret_reprs_are_redacted(self):
        seed = Seed(bytes.fromhex(ALICE_SEED))
        self.assertNotIn(ALICE_SEED, repr(seed))
        self.assertNotIn(ALICE_SEED, repr(secret_key_from_seed(seed)))

    def test_public_key_from_hex(self):
        self.assertEqual(PublicKey.from_hex(ALICE_PUBKEY).hex(), ALICE_PUBKEY)


class TestKeccak(unittest.TestCase):

    def test_empty_vector(self):
        self.assertEqual(
            keccak256(b"").hex(),
            "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470",
        )

    def test_length(self):
        self.assertEqual(len(keccak256(b"abc")), 32)
