"""HTTP Basic credential decoding and verification.

Pure functions, no I/O. The decoder is deliberately tolerant: it skips
characters outside the standard base64 alphabet, stops at the first
``=``, and drops trailing bits that never complete a byte. Malformed
headers therefore decode to *something* and fail verification, rather
than raising.

Usage::

    from wren.auth import decode_basic, verify

    decode_basic("Basic YWRtaW46YWRtaW4xMjM=")   # ("admin", "admin123")
    verify(header, "admin", "admin123")          # True / False
"""

import hmac
import logging

logger = logging.getLogger("wren.auth")

SCHEME_PREFIX = "Basic "
_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
_INDEX = {ch: i for i, ch in enumerate(_ALPHABET)}

# Emitted bytes never read past bit 12.
_ACCUMULATOR_MASK = 0xFFFF


def decode_base64(text: str) -> bytes:
    """Decode standard-alphabet base64 with 6-bit group accumulation.

    Each recognised character adds six bits; every time eight bits are
    available a byte is emitted. ``=`` ends decoding, unknown characters
    are ignored.
    """
    out = bytearray()
    accumulator = 0
    bits = -8
    for ch in text:
        if ch == "=":
            break
        value = _INDEX.get(ch)
        if value is None:
            continue
        accumulator = ((accumulator << 6) | value) & _ACCUMULATOR_MASK
        bits += 6
        if bits >= 0:
            out.append((accumulator >> bits) & 0xFF)
            bits -= 8
    return bytes(out)


def decode_basic(header: str | None) -> tuple[str, str] | None:
    """Split a ``Basic`` header value into ``(user, password)``.

    Returns ``None`` when the scheme prefix is missing or the decoded
    text has no ``:`` separator. Only the first ``:`` splits, so
    passwords may contain colons.
    """
    if not header or not header.startswith(SCHEME_PREFIX):
        logger.debug("Authorization header missing or not Basic")
        return None
    decoded = decode_base64(header[len(SCHEME_PREFIX) :]).decode("utf-8", errors="replace")
    user, sep, password = decoded.partition(":")
    if not sep:
        logger.debug("Basic credentials have no ':' separator")
        return None
    return user, password


def verify(header: str | None, expected_user: str, expected_password: str) -> bool:
    """True iff *header* carries exactly the expected credentials."""
    credentials = decode_basic(header)
    if credentials is None:
        return False
    user, password = credentials
    # Evaluate both comparisons so timing does not reveal which field differed.
    user_ok = hmac.compare_digest(user.encode("utf-8"), expected_user.encode("utf-8"))
    password_ok = hmac.compare_digest(
        password.encode("utf-8"), expected_password.encode("utf-8")
    )
    if not (user_ok and password_ok):
        logger.debug("Basic credentials mismatch for user %r", user)
        return False
    return True
