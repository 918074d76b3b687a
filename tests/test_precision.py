"""
Tests for erdkit_core.precision: denomination helpers.
"""

import unittest
from decimal import Decimal

from erdkit_core.precision import (
    DENOMINATION,
    EGLD_DECIMALS,
    denominated_to_egld,
    egld_to_denominated,
    format_amount,
    from_denominated,
    to_denominated,
)


class TestConstants(unittest.TestCase):

    def test_denomination(self):
        self.assertEqual(EGLD_DECIMALS, 18)
        self.assertEqual(DENOMINATION, 10 ** 18)


class TestToDenominated(unittest.TestCase):

    def test_whole_amount(self):
        self.assertEqual(to_denominated("1"), 10 ** 18)
        self.assertEqual(to_denominated(2), 2 * 10 ** 18)

    def test_fractional_amount(self):
        self.assertEqual(to_denominated("1.5"), 1_500_000_000_000_000_000)
        self.assertEqual(to_denominated("0.01", 2), 1)

    def test_decimal_input(self):
        self.assertEqual(to_denominated(Decimal("0.05")), 50_000_000_000_000_000)

    def test_zero(self):
        self.assertEqual(to_denominated("0"), 0)

    def test_too_many_places(self):
        with self.assertRaises(ValueError):
            to_denominated("0.001", 2)
        with self.assertRaises(ValueError):
            to_denominated("1.0000000000000000001")

    def test_more_digits_than_default_precision(self):
        self.assertEqual(
            to_denominated("12345678901.123456789012345678"),
            12345678901123456789012345678,
        )
        self.assertEqual(to_denominated(10 ** 30 + 1, 0), 10 ** 30 + 1)
        with self.assertRaises(ValueError):
            to_denominated("12345678901.1234567890123456789")

    def test_negative(self):
        with self.assertRaises(ValueError):
            to_denominated("-1")

    def test_garbage(self):
        for bad in ("abc", "", "NaN", "Infinity"):
            with self.subTest(bad=bad):
                with self.assertRaises(ValueError):
                    to_denominated(bad)


class TestFromDenominated(unittest.TestCase):

    def test_roundtrip(self):
        self.assertEqual(denominated_to_egld(egld_to_denominated("12.345")), Decimal("12.345"))

    def test_custom_decimals(self):
        self.assertEqual(from_denominated(15, 1), Decimal("1.5"))

    def test_large_value_is_exact(self):
        self.assertEqual(
            from_denominated(12345678901123456789012345678),
            Decimal("12345678901.123456789012345678"),
        )


class TestFormatAmount(unittest.TestCase):

    def test_egld(self):
        self.assertEqual(format_amount(1_500_000_000_000_000_000), "1.500000000000000000 EGLD")

    def test_token_decimals(self):
        self.assertEqual(format_amount(1_500_000, 6, "USDC"), "1.500000 USDC")

    def test_zero_decimals(self):
        self.assertEqual(format_amount(42, 0, "NFT"), "42 NFT")
