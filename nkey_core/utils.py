"""
nkey_core.utils
---------------
Small helpers for base32 text and secure random bytes.
NKeys use unpadded uppercase RFC 4648 base32.
"""

from __future__ import annotations
import base64, binascii, os
from typing import Callable

RandomSource = Callable[[int], bytes]


def b32e(b: bytes) -> str:
    return base64.b32encode(b).decode("ascii").rstrip("=")


def b32d(s: str) -> bytes:
    # Raises binascii.Error (a ValueError) on bad alphabet or length
    try:
        raw = s.encode("ascii")
    except UnicodeEncodeError as e:
        raise binascii.Error("non-ascii character in base32 input") from e
    return base64.b32decode(raw + b"=" * (-len(raw) % 8))


def random_bytes(n: int, rng: RandomSource | None = None) -> bytes:
    return (rng or os.urandom)(n)
