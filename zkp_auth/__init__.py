"""Chaum-Pedersen zero-knowledge authentication."""

from zkp_auth.actors import Prover, Verifier
from zkp_auth.parameters import GROUP_1024, GROUP_2048, ParameterSet, build_parameters, get_group
from zkp_auth.protocol import Commitment, PublicValues
from zkp_auth.service import AuthenticationService

__version__ = "0.1.0"

__all__ = [
    "AuthenticationService",
    "Commitment",
    "GROUP_1024",
    "GROUP_2048",
    "ParameterSet",
    "Prover",
    "PublicValues",
    "Verifier",
    "build_parameters",
    "get_group",
]
