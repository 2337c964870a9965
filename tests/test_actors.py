"""
Tests for the Prover and Verifier roles
"""

import os
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from zkp_auth import protocol
from zkp_auth.actors import Prover, Verifier
from zkp_auth.parameters import GROUP_1024, TOY_GROUP
from test_config import TOY_SECRET


class TestProver(unittest.TestCase):

    def setUp(self):
        self.params = GROUP_1024
        self.prover = Prover.with_random_secret(self.params)

    def test_public_values_derived_once(self):
        expected = protocol.derive_public_values(self.params, self.prover.secret)
        self.assertEqual(self.prover.public_values, expected)
        self.assertIs(self.prover.public_values, self.prover.public_values)

    def test_toy_public_values(self):
        self.assertEqual(Prover(TOY_GROUP, TOY_SECRET).public_values, (2, 18))

    def test_commitment_matches_randomness(self):
        commitment, k = self.prover.generate_commitment()
        self.assertTrue(0 <= k < self.params.q)
        self.assertEqual(commitment, protocol.derive_commitment(self.params, k))

    def test_fresh_randomness_per_commitment(self):
        _, k1 = self.prover.generate_commitment()
        _, k2 = self.prover.generate_commitment()
        self.assertNotEqual(k1, k2)

    def test_randomness_not_kept_on_instance(self):
        _, k = self.prover.generate_commitment()
        self.assertNotIn(k, vars(self.prover).values())

    def test_repr_hides_secret(self):
        self.assertNotIn(str(self.prover.secret), repr(self.prover))


class TestVerifier(unittest.TestCase):

    def setUp(self):
        self.params = GROUP_1024
        self.verifier = Verifier(self.params)

    def test_challenge_range(self):
        for _ in range(10):
            c = self.verifier.generate_challenge()
            self.assertTrue(0 <= c < self.params.q)

    def test_round_trip_with_prover(self):
        prover = Prover.with_random_secret(self.params)
        commitment, k = prover.generate_commitment()
        c = self.verifier.generate_challenge()
        s = prover.generate_response(c, k)
        self.assertTrue(self.verifier.verify(commitment, c, s, prover.public_values))

    def test_interleaved_attempts(self):
        """Two open attempts on one prover complete in either order"""
        prover = Prover.with_random_secret(self.params)
        (r_a, k_a), (r_b, k_b) = prover.generate_commitment(), prover.generate_commitment()
        c_a, c_b = self.verifier.generate_challenge(), self.verifier.generate_challenge()
        s_b = prover.generate_response(c_b, k_b)
        s_a = prover.generate_response(c_a, k_a)
        self.assertTrue(self.verifier.verify(r_b, c_b, s_b, prover.public_values))
        self.assertTrue(self.verifier.verify(r_a, c_a, s_a, prover.public_values))
        self.assertFalse(self.verifier.verify(r_a, c_a, s_b, prover.public_values))


if __name__ == '__main__':
    unittest.main()
