"""
protocol.py
------------
Implements the Chaum-Pedersen Sigma protocol arithmetic:
- Public value derivation   y1 = alpha^x, y2 = beta^x        (mod p)
- Commitment                r1 = alpha^k, r2 = beta^k        (mod p)
- Response                  s  = k - c*x                     (mod q)
- Verification              r1 == alpha^s * y1^c, r2 == beta^s * y2^c  (mod p)

Everything here is pure: no I/O, no randomness, no state.
"""

from typing import NamedTuple

from zkp_auth.parameters import ParameterSet


class PublicValues(NamedTuple):
    y1: int
    y2: int


class Commitment(NamedTuple):
    r1: int
    r2: int


def _exponentiate_pair(params: ParameterSet, exponent: int):
    return pow(params.alpha, exponent, params.p), pow(params.beta, exponent, params.p)


def derive_public_values(params: ParameterSet, secret: int) -> PublicValues:
    return PublicValues(*_exponentiate_pair(params, secret))


def derive_commitment(params: ParameterSet, randomness: int) -> Commitment:
    return Commitment(*_exponentiate_pair(params, randomness))


def derive_response(params: ParameterSet, randomness: int, challenge: int, secret: int) -> int:
    """
    s = k - c*x mod q, normalised into [0, q).

    k - c*x is negative whenever c*x > k, so the two cases are reduced
    separately. In the negative case q - ((c*x - k) mod q) would be q itself
    when c*x - k is a multiple of q; that boundary maps to 0.
    """
    q = params.q
    cx = challenge * secret
    if randomness >= cx:
        return (randomness - cx) % q
    deficit = (cx - randomness) % q
    if deficit == 0:
        return 0
    return q - deficit


def verify(params: ParameterSet, commitment: Commitment, challenge: int,
           response: int, public_values: PublicValues) -> bool:
    """
    Checks both Chaum-Pedersen equations. True only if r1 and r2 both match.
    """
    p = params.p
    r1, r2 = commitment
    y1, y2 = public_values

    cond1 = r1 == (pow(params.alpha, response, p) * pow(y1, challenge, p)) % p
    cond2 = r2 == (pow(params.beta, response, p) * pow(y2, challenge, p)) % p
    return cond1 and cond2
