"""
nkey_core.prefix
----------------
Role codes and the prefix bytes that make encoded keys self-describing.

A prefix byte is a 5-bit code shifted left by three, so the first base32
character of an encoded key is the letter for that code:

    ACCOUNT  -> 'A'     SERVER   -> 'N'     PRIVATE -> 'P'
    CLUSTER  -> 'C'     OPERATOR -> 'O'     SEED    -> 'S'
    USER     -> 'U'

Codes not listed here are reserved.
"""

from __future__ import annotations
from enum import Enum

# Kind codes shared by every role
PRIVATE_CODE = 15
SEED_CODE = 18

PREFIX_BYTE_PRIVATE = PRIVATE_CODE << 3  # 'P...'
PREFIX_BYTE_SEED = SEED_CODE << 3        # 'S...'


class Role(Enum):
    ACCOUNT = 0
    CLUSTER = 2
    SERVER = 13
    OPERATOR = 14
    USER = 20

    @property
    def prefix(self) -> int:
        return self.value << 3

    @classmethod
    def from_code(cls, code: int) -> "Role":
        return cls(code)

    @classmethod
    def from_prefix(cls, prefix: int) -> "Role":
        """Resolve a prefix byte to its role; ValueError for reserved or kind bytes."""
        if prefix & 0x07:
            raise ValueError(f"prefix byte has reserved low bits set: {prefix:#04x}")
        return cls(prefix >> 3)
