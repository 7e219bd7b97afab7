"""
nkey_core.codec
---------------
Text encoding for NKeys.

Every encoded key is unpadded base32 of:

    prefix (1 or 2 bytes) || payload || crc16 (2 bytes, little-endian)

- public keys:  one role prefix byte, 32-byte payload
- private keys: PREFIX_BYTE_PRIVATE, 64-byte payload (seed || public key)
- seeds:        two bytes packing PREFIX_BYTE_SEED with the role prefix, so
                the string starts with 'S' followed by the role letter.
                The payload is the 32-byte seed or seed || public key.

Decoding always checks the checksum before looking at the prefix, so a
corrupted string is reported as ChecksumMismatch rather than WrongKeyType.
Only canonical base32 is accepted: unused bits in the last character must
be zero.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple, Union
import binascii

from .crc16 import crc16_bytes, validate_crc16
from .errors import (
    ChecksumMismatch, CodecError, EmptyOrMalformedInput, InvalidEncoding,
    InvalidPayloadSize, WrongKeyType,
)
from .logger import get_logger
from .prefix import PREFIX_BYTE_PRIVATE, PREFIX_BYTE_SEED, Role
from .utils import b32d, b32e

log = get_logger("NKey.Codec")

PUBLIC_PAYLOAD_SIZE = 32
PRIVATE_PAYLOAD_SIZE = 64
SEED_PAYLOAD_SIZES = (32, 64)

# Minimum encoded lengths: ceil(bytes * 8 / 5)
PUBLIC_KEY_LENGTH = 56    # 1 + 32 + 2 bytes
PRIVATE_KEY_LENGTH = 108  # 1 + 64 + 2 bytes
SEED_MIN_LENGTH = 58      # 2 + 32 + 2 bytes

_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"

Prefix = Union[Role, int]


@dataclass(frozen=True)
class DecodedSeed:
    prefix: int
    bytes: bytes

    @property
    def role(self) -> Role:
        try:
            return Role.from_prefix(self.prefix)
        except ValueError as e:
            raise WrongKeyType(f"seed carries a reserved role prefix {self.prefix:#04x}") from e


def _prefix_byte(prefix: Prefix) -> int:
    if isinstance(prefix, Role):
        return prefix.prefix
    if prefix == PREFIX_BYTE_PRIVATE:
        return prefix
    try:
        return Role.from_prefix(prefix).prefix
    except ValueError as e:
        raise WrongKeyType(f"not a public or private prefix: {prefix!r}") from e


def _payload_size(prefix_byte: int) -> int:
    return PRIVATE_PAYLOAD_SIZE if prefix_byte == PREFIX_BYTE_PRIVATE else PUBLIC_PAYLOAD_SIZE


def _seal(raw: bytes) -> str:
    return b32e(raw + crc16_bytes(raw))


def _unseal(src: str, min_length: int) -> bytes:
    """base32-decode and checksum-verify; returns prefix + payload."""
    if not isinstance(src, str) or len(src) < min_length:
        raise EmptyOrMalformedInput(
            f"encoded key too short: need at least {min_length} characters"
        )
    try:
        raw = b32d(src)
    except (binascii.Error, ValueError) as e:
        raise InvalidEncoding("invalid base32 encoding") from e

    body, carried = raw[:-2], raw[-2:]
    if not validate_crc16(body, int.from_bytes(carried, "little")):
        raise ChecksumMismatch("checksum does not match")

    # The last character may carry unused bits; they must be zero
    if b32e(raw) != src:
        raise InvalidEncoding("non-canonical base32: unused trailing bits are set")
    return body


# --------- encode ----------
def encode(prefix: Prefix, data: bytes) -> str:
    """Encode a public key (role prefix) or private key (PREFIX_BYTE_PRIVATE)."""
    pb = _prefix_byte(prefix)
    size = _payload_size(pb)
    if len(data) != size:
        raise InvalidPayloadSize(f"payload must be {size} bytes, got {len(data)}")
    return _seal(bytes([pb]) + bytes(data))


def encode_seed(role: Role, seed: bytes) -> str:
    if not isinstance(role, Role):
        raise WrongKeyType(f"seed role must be a Role, got {role!r}")
    if len(seed) not in SEED_PAYLOAD_SIZES:
        raise InvalidPayloadSize(f"seed must be 32 or 64 bytes, got {len(seed)}")

    p = role.prefix
    b0 = PREFIX_BYTE_SEED | (p >> 5)
    b1 = (p << 3) & 0xFF
    return _seal(bytes([b0, b1]) + bytes(seed))


# --------- decode ----------
def decode(expected: Prefix, src: str) -> bytes:
    """Decode a public or private key string, checking it carries `expected`."""
    pb = _prefix_byte(expected)
    size = _payload_size(pb)
    min_length = PRIVATE_KEY_LENGTH if pb == PREFIX_BYTE_PRIVATE else PUBLIC_KEY_LENGTH

    body = _unseal(src, min_length)
    if body[0] != pb:
        log.debug(f"[DECODE] prefix {body[0]:#04x} does not match expected {pb:#04x}")
        raise WrongKeyType(f"expected prefix {pb:#04x}, found {body[0]:#04x}")

    payload = body[1:]
    if len(payload) != size:
        raise InvalidPayloadSize(f"payload must be {size} bytes, got {len(payload)}")
    return payload


def decode_seed(src: str) -> DecodedSeed:
    body = _unseal(src, SEED_MIN_LENGTH)

    b0, b1 = body[0], body[1]
    if b0 & 0xF8 != PREFIX_BYTE_SEED:
        log.debug("[DECODE] seed rejected: not a seed prefix")
        raise WrongKeyType("not a seed")

    prefix = ((b0 & 0x07) << 5) | ((b1 & 0xF8) >> 3)
    payload = body[2:]
    if len(payload) not in SEED_PAYLOAD_SIZES:
        raise InvalidPayloadSize(f"seed payload must be 32 or 64 bytes, got {len(payload)}")
    return DecodedSeed(prefix=prefix, bytes=payload)


def decode_public_key(src: str) -> Tuple[Role, bytes]:
    """Decode a public key of any role; the role is read only after the checksum passes."""
    body = _unseal(src, PUBLIC_KEY_LENGTH)
    try:
        role = Role.from_prefix(body[0])
    except ValueError as e:
        log.debug(f"[DECODE] prefix {body[0]:#04x} is not a role")
        raise WrongKeyType(f"not a public key prefix: {body[0]:#04x}") from e

    payload = body[1:]
    if len(payload) != PUBLIC_PAYLOAD_SIZE:
        raise InvalidPayloadSize(f"payload must be {PUBLIC_PAYLOAD_SIZE} bytes, got {len(payload)}")
    return role, payload


# --------- inspection ----------
def role_of(src: str) -> Role:
    """Role named by the leading character(s) of a public key or seed.

    Only the prefix is read. The payload and checksum are not validated.
    """
    if not isinstance(src, str) or len(src) < 2:
        raise EmptyOrMalformedInput("encoded key too short")
    try:
        first = _ALPHABET.index(src[0])
        if first == PREFIX_BYTE_SEED >> 3:
            return Role.from_code(_ALPHABET.index(src[1]))
        return Role.from_code(first)
    except ValueError as e:
        raise WrongKeyType(f"no role for leading characters {src[:2]!r}") from e


def is_valid_public_key(src: str, role: Optional[Role] = None) -> bool:
    try:
        if role is None:
            decode_public_key(src)
        else:
            decode(role, src)
        return True
    except CodecError:
        return False
