"""
exceptions.py
--------------
Error kinds raised by the authentication service.

Every error is terminal for the operation that raised it. The HTTP layer
maps each kind to a status code via ``http_status`` and reports only the
kind and message, never internal state.
"""


class ZKPAuthError(Exception):
    """Base class for errors surfaced to callers of the service."""

    http_status = 500
    kind = "internal_error"


class InvalidEncoding(ZKPAuthError):
    """Malformed identity or integer bytes at the boundary."""

    http_status = 400
    kind = "invalid_encoding"


class UnknownIdentity(ZKPAuthError):
    """No public values are on record for this identity."""

    http_status = 404
    kind = "unknown_identity"


class UnknownOrConsumedSession(ZKPAuthError):
    """The auth_id is not pending: never issued, already used, expired or evicted."""

    http_status = 404
    kind = "unknown_session"


class VerificationFailed(ZKPAuthError):
    """The Chaum-Pedersen check rejected the response."""

    http_status = 403
    kind = "verification_failed"


class TooManySessions(ZKPAuthError):
    """The pending-login limit, overall or for this user, has been reached."""

    http_status = 429
    kind = "too_many_sessions"


class MissingParameter(ValueError):
    """A group parameter was not supplied when building a ParameterSet."""

    def __init__(self, name):
        super().__init__(f"Group parameter '{name}' is required")
        self.name = name


class InvalidParameters(ValueError):
    """Group parameters are inconsistent, e.g. q does not divide p - 1."""


ERROR_KINDS = {
    cls.kind: cls
    for cls in (InvalidEncoding, UnknownIdentity, UnknownOrConsumedSession,
                VerificationFailed, TooManySessions)
}
