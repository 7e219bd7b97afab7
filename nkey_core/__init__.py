"""
NKey Core Package
=================
Self-describing Ed25519 identity keys.

Provides:
- CRC-16/XMODEM checksum for typo detection
- Prefixed base32 codec for public keys, private keys and seeds
- Role prefixes (operator, server, cluster, account, user)
- NKey: role-tagged key object with sign/verify
"""

from .codec import DecodedSeed, decode, decode_public_key, decode_seed, encode, encode_seed, is_valid_public_key, role_of
from .crc16 import crc16
from .errors import (
    ChecksumMismatch, CodecError, EmptyOrMalformedInput, IllegalState, InvalidArgument,
    InvalidEncoding, InvalidPayloadSize, NKeyError, WrongKeyType,
)
from .nkey import NKey
from .prefix import PREFIX_BYTE_PRIVATE, PREFIX_BYTE_SEED, Role

__all__ = [
    "NKey",
    "Role",
    "PREFIX_BYTE_PRIVATE",
    "PREFIX_BYTE_SEED",
    "DecodedSeed",
    "crc16",
    "encode",
    "encode_seed",
    "decode",
    "decode_seed",
    "decode_public_key",
    "role_of",
    "is_valid_public_key",
    "NKeyError",
    "CodecError",
    "InvalidPayloadSize",
    "EmptyOrMalformedInput",
    "InvalidEncoding",
    "ChecksumMismatch",
    "WrongKeyType",
    "InvalidArgument",
    "IllegalState",
]
