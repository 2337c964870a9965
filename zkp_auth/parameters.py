"""
parameters.py
--------------
Group parameters for the Chaum-Pedersen protocol.

A ParameterSet fixes the prime modulus p, the prime order q of the working
subgroup and two generators alpha, beta of that subgroup. It is built once at
startup and shared, read-only, by the prover, the verifier and the service.

Includes:
- Validated construction from a mapping of fields (build_parameters)
- The well-known safe-prime MODP groups used by server and client
"""

from dataclasses import dataclass
from typing import Mapping, Optional

from zkp_auth.exceptions import InvalidParameters, MissingParameter

REQUIRED_FIELDS = ("p", "q", "alpha", "beta")


@dataclass(frozen=True)
class ParameterSet:
    p: int
    q: int
    alpha: int
    beta: int

    def validate(self) -> "ParameterSet":
        """
        Checks q | p-1 and that both generators are non-trivial elements
        of the order-q subgroup. Returns self so it can be chained.
        """
        p, q = self.p, self.q
        if p < 3 or q < 2:
            raise InvalidParameters("p must be at least 3 and q at least 2")
        if (p - 1) % q != 0:
            raise InvalidParameters("q must divide p - 1")
        for name in ("alpha", "beta"):
            g = getattr(self, name)
            if not 1 < g < p:
                raise InvalidParameters(f"{name} must satisfy 1 < {name} < p")
            if pow(g, q, p) != 1:
                raise InvalidParameters(f"{name} does not generate a subgroup of order q")
        return self

    def to_dict(self) -> dict:
        return {"p": self.p, "q": self.q, "alpha": self.alpha, "beta": self.beta}


def build_parameters(fields: Mapping[str, Optional[int]], validate: bool = True) -> ParameterSet:
    """
    Construct a ParameterSet from a mapping holding p, q, alpha and beta.
    Raises MissingParameter naming the first absent field.
    """
    values = {}
    for name in REQUIRED_FIELDS:
        value = fields.get(name)
        if value is None:
            raise MissingParameter(name)
        values[name] = int(value)
    params = ParameterSet(**values)
    return params.validate() if validate else params


# ===========================================================
# Well-known groups
# ===========================================================
# RFC 2409 Oakley group 2 (1024-bit safe prime)
_P_1024 = int(
    "FFFFFFFFFFFFFFFFC90FDAA22168C234C4C6628B80DC1CD1"
    "29024E088A67CC74020BBEA63B139B22514A08798E3404DD"
    "EF9519B3CD3A431B302B0A6DF25F14374FE1356D6D51C245"
    "E485B576625E7EC6F44C42E9A637ED6B0BFF5CB6F406B7ED"
    "EE386BFB5A899FA5AE9F24117C4B1FE649286651ECE65381"
    "FFFFFFFFFFFFFFFF",
    16,
)

# RFC 3526 group 14 (2048-bit safe prime)
_P_2048 = int(
    "FFFFFFFFFFFFFFFFC90FDAA22168C234C4C6628B80DC1CD1"
    "29024E088A67CC74020BBEA63B139B22514A08798E3404DD"
    "EF9519B3CD3A431B302B0A6DF25F14374FE1356D6D51C245"
    "E485B576625E7EC6F44C42E9A637ED6B0BFF5CB6F406B7ED"
    "EE386BFB5A899FA5AE9F24117C4B1FE649286651ECE45B3D"
    "C2007CB8A163BF0598DA48361C55D39A69163FA8FD24CF5F"
    "83655D23DCA3AD961C62F356208552BB9ED529077096966D"
    "670C354E4ABC9804F1746C08CA18217C32905E462E36CE3B"
    "E39E772C180E86039B2783A2EC07A28FB5C55DF06F4C52C9"
    "DE2BCBF6955817183995497CEA956AE515D2261898FA0510"
    "15728E5A8AACAA68FFFFFFFFFFFFFFFF",
    16,
)


def _safe_prime_group(p: int) -> ParameterSet:
    # For a safe prime p = 2q + 1 the squares form the subgroup of order q,
    # so 4 = 2^2 and 9 = 3^2 both generate it.
    return ParameterSet(p=p, q=(p - 1) // 2, alpha=4, beta=9)


GROUP_1024 = _safe_prime_group(_P_1024)
GROUP_2048 = _safe_prime_group(_P_2048)

# Small group for worked examples only: 4 and 2 both have order 11 mod 23.
TOY_GROUP = ParameterSet(p=23, q=11, alpha=4, beta=2)

_GROUPS = {1024: GROUP_1024, 2048: GROUP_2048}


def get_group(bits: int) -> ParameterSet:
    try:
        return _GROUPS[bits].validate()
    except KeyError:
        raise InvalidParameters(f"No built-in group of {bits} bits (choose 1024 or 2048)") from None
