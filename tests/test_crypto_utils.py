"""
Tests for randomness and integer encoding helpers
"""

import os
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import zkp_auth.crypto_utils as crypto
from zkp_auth.exceptions import InvalidEncoding


class TestRandomness(unittest.TestCase):

    def test_secure_random_bytes(self):
        """Test secure random byte generation"""
        random_data = crypto.secure_random_bytes(32)
        self.assertEqual(len(random_data), 32)
        self.assertNotEqual(random_data, crypto.secure_random_bytes(32))

    def test_random_below_range(self):
        for bound in (1, 2, 11, 255, 256, 257, 2**160 + 7):
            for _ in range(50):
                value = crypto.random_below(bound)
                self.assertTrue(0 <= value < bound)

    def test_random_below_covers_small_range(self):
        seen = {crypto.random_below(11) for _ in range(500)}
        self.assertEqual(seen, set(range(11)))

    def test_random_below_rejects_non_positive(self):
        with self.assertRaises(ValueError):
            crypto.random_below(0)

    def test_random_token(self):
        token = crypto.random_token(16)
        self.assertEqual(len(token), 32)
        int(token, 16)
        self.assertNotEqual(token, crypto.random_token(16))


class TestEncoding(unittest.TestCase):

    def test_big_endian(self):
        self.assertEqual(crypto.int_to_bytes(256), b"\x01\x00")
        self.assertEqual(crypto.bytes_to_int(b"\x01\x00"), 256)

    def test_zero_is_one_byte(self):
        self.assertEqual(crypto.int_to_bytes(0), b"\x00")
        self.assertEqual(crypto.decode_int(crypto.encode_int(0)), 0)

    def test_negative_rejected(self):
        with self.assertRaises(ValueError):
            crypto.int_to_bytes(-1)

    def test_large_integer_lossless(self):
        value = (1 << 2047) + 12345
        encoded = crypto.encode_int(value)
        self.assertNotIn('=', encoded)
        self.assertNotIn('+', encoded)
        self.assertNotIn('/', encoded)
        self.assertEqual(crypto.decode_int(encoded), value)

    def test_leading_zero_bytes_ignored(self):
        self.assertEqual(crypto.decode_int(crypto.base64url_encode(b"\x00\x00\x05")), 5)

    def test_malformed_base64(self):
        for bad in ("***", "a", "é", 42, None):
            with self.assertRaises(InvalidEncoding):
                crypto.decode_int(bad)

    def test_standard_alphabet_rejected(self):
        """'+' and '/' belong to plain base64, not base64url"""
        for bad in ("+/8", "-/8", "+_8"):
            with self.assertRaises(InvalidEncoding):
                crypto.decode_int(bad)
        self.assertEqual(crypto.decode_int("-_8"), 0xfbff)

    def test_nonzero_trailing_bits_rejected(self):
        """Each value has exactly one accepted encoding"""
        self.assertEqual(crypto.decode_int("AA"), 0)
        with self.assertRaises(InvalidEncoding):
            crypto.decode_int("AB")

    def test_optional_padding(self):
        self.assertEqual(crypto.base64url_decode("AQ=="), b"\x01")
        for bad in ("AQ=", "AQ===", "AQ=A"):
            with self.assertRaises(InvalidEncoding):
                crypto.base64url_decode(bad)

    def test_empty_integer(self):
        with self.assertRaises(InvalidEncoding):
            crypto.decode_int("")


if __name__ == '__main__':
    unittest.main()
