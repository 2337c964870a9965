"""
actors.py
----------
Prover and Verifier roles of the Chaum-Pedersen protocol.

Both roles delegate the arithmetic to zkp_auth.protocol and draw their
randomness from the libsodium CSPRNG.
"""

from typing import Tuple

from zkp_auth import protocol
from zkp_auth.crypto_utils import random_below
from zkp_auth.parameters import ParameterSet
from zkp_auth.protocol import Commitment, PublicValues


class Prover:
    """
    Holds the secret x and its public values (y1, y2).

    The commitment randomness k is handed back to the caller rather than
    kept on the instance, so one Prover can run several independent
    attempts at once. Each k must be used for exactly one response.
    """

    def __init__(self, params: ParameterSet, secret: int):
        self.params = params
        self._secret = secret
        self._public_values = protocol.derive_public_values(params, secret)

    @classmethod
    def with_random_secret(cls, params: ParameterSet) -> "Prover":
        return cls(params, random_below(params.q))

    @property
    def secret(self) -> int:
        return self._secret

    @property
    def public_values(self) -> PublicValues:
        return self._public_values

    def generate_commitment(self) -> Tuple[Commitment, int]:
        """Returns ((r1, r2), k). Discard k once the response is computed."""
        randomness = random_below(self.params.q)
        return protocol.derive_commitment(self.params, randomness), randomness

    def generate_response(self, challenge: int, randomness: int) -> int:
        return protocol.derive_response(self.params, randomness, challenge, self._secret)

    def __repr__(self):
        return f"Prover(public_values={self._public_values!r})"


class Verifier:
    def __init__(self, params: ParameterSet):
        self.params = params

    def generate_challenge(self) -> int:
        return random_below(self.params.q)

    def verify(self, commitment: Commitment, challenge: int, response: int,
               public_values: PublicValues) -> bool:
        return protocol.verify(self.params, commitment, challenge, response, public_values)
