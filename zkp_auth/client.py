"""
client.py
----------
HTTP client for the ZKP authentication server, plus local secret storage.

The secret x never leaves this process: only (y1, y2), (r1, r2) and s are
sent to the server.
"""

import logging
import os
from typing import Tuple

import requests

from zkp_auth import config
from zkp_auth.actors import Prover
from zkp_auth.crypto_utils import decode_int, encode_int
from zkp_auth.exceptions import ERROR_KINDS, ZKPAuthError
from zkp_auth.parameters import ParameterSet
from zkp_auth.protocol import Commitment, PublicValues

logger = logging.getLogger(__name__)


# ===========================================================
# Secret file handling
# ===========================================================
def secret_path(user_id: str, directory: str = None) -> str:
    return os.path.join(directory or config.SECRET_DIR, f".secret_{user_id}")


def save_secret(user_id: str, secret: int, directory: str = None) -> str:
    path = secret_path(user_id, directory)
    # Owner read/write only
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w") as f:
        f.write(str(secret))
    return path


def load_secret(user_id: str, directory: str = None) -> int:
    """Raises FileNotFoundError if the user has not registered from here."""
    with open(secret_path(user_id, directory)) as f:
        return int(f.read().strip())


# ===========================================================
# HTTP client
# ===========================================================
class AuthClient:
    def __init__(self, base_url: str = config.SERVER_URL, http=None,
                 timeout: float = config.REQUEST_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.http = http if http is not None else requests.Session()
        self.timeout = timeout

    def _post(self, path: str, body: dict) -> dict:
        resp = self.http.post(self.base_url + path, json=body, timeout=self.timeout)
        return self._handle(resp)

    def _handle(self, resp) -> dict:
        if resp.status_code == 200:
            return resp.json()
        try:
            payload = resp.json()
        except ValueError:
            payload = {}
        error_cls = ERROR_KINDS.get(payload.get("error"))
        message = payload.get("message") or f"HTTP {resp.status_code}"
        if error_cls is not None:
            raise error_cls(message)
        raise ZKPAuthError(message)

    def fetch_parameters(self) -> ParameterSet:
        resp = self.http.get(self.base_url + "/parameters", timeout=self.timeout)
        data = self._handle(resp)
        return ParameterSet(**{name: decode_int(data[name]) for name in ("p", "q", "alpha", "beta")})

    def register(self, user_id: str, public_values: PublicValues):
        self._post("/register", {
            "user_id": user_id,
            "y1": encode_int(public_values.y1),
            "y2": encode_int(public_values.y2),
        })

    def begin(self, user_id: str, commitment: Commitment) -> Tuple[str, int]:
        data = self._post("/login/start", {
            "user_id": user_id,
            "r1": encode_int(commitment.r1),
            "r2": encode_int(commitment.r2),
        })
        return data["auth_id"], decode_int(data["c"])

    def complete(self, auth_id: str, s: int) -> str:
        data = self._post("/login/finish", {"auth_id": auth_id, "s": encode_int(s)})
        return data["session_id"]

    def login(self, user_id: str, prover: Prover) -> str:
        """
        Runs one full attempt: commit, receive challenge, respond.
        Returns the session id issued by the server.
        """
        commitment, randomness = prover.generate_commitment()
        auth_id, challenge = self.begin(user_id, commitment)
        logger.info("Received challenge for user %r", user_id)
        s = prover.generate_response(challenge, randomness)
        return self.complete(auth_id, s)
