"""
service.py
-----------
Server side of the authentication flow:
- register: store a user's public values (y1, y2)
- begin_authentication: accept commitments (r1, r2), issue a challenge c
- complete_authentication: check the response s, issue a session token

Pending sessions are consumed exactly once: the entry is removed before the
proof is checked, so a failed or replayed completion must start over from
begin_authentication.
"""

import logging
import time
from typing import Tuple

from zkp_auth import config
from zkp_auth.actors import Verifier
from zkp_auth.crypto_utils import random_token
from zkp_auth.exceptions import (
    InvalidEncoding,
    UnknownIdentity,
    UnknownOrConsumedSession,
    VerificationFailed,
)
from zkp_auth.parameters import ParameterSet
from zkp_auth.protocol import Commitment, PublicValues
from zkp_auth.storage import MemoryStorage, PendingSession

logger = logging.getLogger(__name__)


def _is_integer(value):
    # bool is a subclass of int
    return isinstance(value, int) and not isinstance(value, bool)


class AuthenticationService:
    def __init__(self, params: ParameterSet, storage=None,
                 challenge_ttl: int = config.CHALLENGE_TTL, clock=time.time):
        self.params = params
        self.storage = storage if storage is not None else MemoryStorage()
        self.challenge_ttl = challenge_ttl
        self.verifier = Verifier(params)
        self._clock = clock

    # ===========================================================
    # Boundary checks
    # ===========================================================
    def _check_user_id(self, user_id):
        if not isinstance(user_id, str) or not user_id:
            raise InvalidEncoding("user_id must be a non-empty string")
        if len(user_id) > config.MAX_USER_ID_LENGTH:
            raise InvalidEncoding("user_id is too long")

    def _check_element(self, name, value):
        if not _is_integer(value) or not 0 < value < self.params.p:
            raise InvalidEncoding(f"{name} is not an element of the group")

    # ===========================================================
    # Operations
    # ===========================================================
    def register(self, user_id: str, y1: int, y2: int):
        """
        Store (y1, y2) for user_id, replacing any earlier registration.
        No proof of possession is asked for here.
        """
        self._check_user_id(user_id)
        self._check_element("y1", y1)
        self._check_element("y2", y2)
        self.storage.store_user(user_id, PublicValues(y1, y2))
        logger.info("Registered user %r", user_id)

    def begin_authentication(self, user_id: str, r1: int, r2: int) -> Tuple[str, int]:
        """
        Called when the client sends commitments (r1, r2).
        Returns (auth_id, challenge); auth_id is the capability for completion.
        """
        self._check_user_id(user_id)
        self._check_element("r1", r1)
        self._check_element("r2", r2)
        if self.storage.get_user(user_id) is None:
            raise UnknownIdentity(f"User {user_id!r} is not registered")

        now = self._clock()
        swept = self.storage.sweep_expired(now)
        if swept:
            logger.info("Dropped %d expired pending sessions", swept)

        challenge = self.verifier.generate_challenge()
        auth_id = random_token(config.AUTH_ID_BYTES)
        session = PendingSession(user_id, challenge, Commitment(r1, r2), now + self.challenge_ttl)
        self.storage.store_session(auth_id, session, now)
        logger.info("Created challenge for user %r", user_id)
        return auth_id, challenge

    def complete_authentication(self, auth_id: str, s: int) -> str:
        """
        Called when the client responds with s.
        Returns a fresh session token if the proof holds.
        """
        if not isinstance(auth_id, str) or not auth_id:
            raise InvalidEncoding("auth_id must be a non-empty string")
        if not _is_integer(s) or not 0 <= s < self.params.q:
            raise InvalidEncoding("s is out of range")

        session = self.storage.pop_session(auth_id, self._clock())
        if session is None:
            raise UnknownOrConsumedSession("Session not found")

        public_values = self.storage.get_user(session.user_id)
        if public_values is None:
            raise UnknownIdentity(f"User {session.user_id!r} is not registered")

        if not self.verifier.verify(session.commitment, session.challenge, s, public_values):
            logger.warning("Authentication failed for user %r", session.user_id)
            raise VerificationFailed("Authentication failed")

        logger.info("Authentication successful for user %r", session.user_id)
        return random_token(config.SESSION_TOKEN_BYTES)
