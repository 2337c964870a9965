import base64
import binascii

from nacl.utils import random as nacl_random

from zkp_auth.exceptions import InvalidEncoding


def secure_random_bytes(n: int) -> bytes:
    return nacl_random(n)


def random_below(bound: int) -> int:
    """
    Uniform integer in [0, bound) from the libsodium CSPRNG.
    Rejection sampling over the smallest covering bit width avoids modulo bias.
    """
    if bound <= 0:
        raise ValueError("bound must be positive")
    bits = bound.bit_length()
    nbytes = (bits + 7) // 8
    excess = nbytes * 8 - bits
    while True:
        candidate = bytes_to_int(secure_random_bytes(nbytes)) >> excess
        if candidate < bound:
            return candidate


def random_token(nbytes: int) -> str:
    return secure_random_bytes(nbytes).hex()


def bytes_to_int(b: bytes) -> int:
    return int.from_bytes(b, 'big')


def int_to_bytes(x: int) -> bytes:
    # Minimal big-endian form; zero is a single 0x00 byte.
    if x < 0:
        raise ValueError("only unsigned integers can be encoded")
    return x.to_bytes(max(1, (x.bit_length() + 7) // 8), 'big')


def base64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode('ascii').rstrip('=')


def base64url_decode(data: str) -> bytes:
    """
    Strict base64url: URL-safe alphabet only, optional '=' padding, and the
    unused trailing bits must be zero so every value has one encoding.
    """
    if not isinstance(data, str):
        raise InvalidEncoding("expected a base64url string")
    unpadded = data.rstrip('=')
    padding = -len(unpadded) % 4
    if len(data) not in (len(unpadded), len(unpadded) + padding):
        raise InvalidEncoding("incorrect base64url padding")
    try:
        raw = base64.b64decode(unpadded + '=' * padding, altchars=b'-_', validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidEncoding(f"malformed base64url value: {e}") from e
    # Catches '+' and '/' too, which b64decode accepts next to altchars
    if base64url_encode(raw) != unpadded:
        raise InvalidEncoding("non-canonical base64url value")
    return raw


def encode_int(x: int) -> str:
    return base64url_encode(int_to_bytes(x))


def decode_int(data: str) -> int:
    raw = base64url_decode(data)
    if not raw:
        raise InvalidEncoding("empty integer encoding")
    return bytes_to_int(raw)
