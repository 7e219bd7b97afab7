import os
import random
import pytest

from nkey_core.codec import (
    DecodedSeed, decode, decode_public_key, decode_seed, encode, encode_seed,
    is_valid_public_key, role_of,
)
from nkey_core.crc16 import crc16_bytes
from nkey_core.errors import (
    ChecksumMismatch, CodecError, EmptyOrMalformedInput, InvalidEncoding,
    InvalidPayloadSize, WrongKeyType,
)
from nkey_core.prefix import PREFIX_BYTE_PRIVATE, PREFIX_BYTE_SEED, Role
from nkey_core.utils import b32e

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"

LEADING = {
    Role.ACCOUNT: "A",
    Role.CLUSTER: "C",
    Role.SERVER: "N",
    Role.OPERATOR: "O",
    Role.USER: "U",
}


@pytest.mark.parametrize("role", list(Role))
def test_encode_decode_public(role):
    data = os.urandom(32)
    encoded = encode(role, data)
    assert len(encoded) == 56
    assert encoded[0] == LEADING[role]
    assert decode(role, encoded) == data


def test_encode_decode_private():
    data = os.urandom(64)
    encoded = encode(PREFIX_BYTE_PRIVATE, data)
    assert encoded.startswith("P")
    assert len(encoded) == 108
    assert decode(PREFIX_BYTE_PRIVATE, encoded) == data


@pytest.mark.parametrize("role", list(Role))
@pytest.mark.parametrize("size", [32, 64])
def test_encode_decode_seed(role, size):
    data = os.urandom(size)
    encoded = encode_seed(role, data)
    assert encoded[:2] == "S" + LEADING[role]

    decoded = decode_seed(encoded)
    assert decoded == DecodedSeed(prefix=role.prefix, bytes=data)
    assert decoded.role is role


def test_encoding_is_unpadded_uppercase():
    encoded = encode_seed(Role.ACCOUNT, os.urandom(32))
    assert "=" not in encoded
    assert set(encoded) <= set(ALPHABET)


def test_encode_payload_size():
    with pytest.raises(InvalidPayloadSize):
        encode(Role.ACCOUNT, os.urandom(31))
    with pytest.raises(InvalidPayloadSize):
        encode(PREFIX_BYTE_PRIVATE, os.urandom(32))
    with pytest.raises(InvalidPayloadSize):
        encode_seed(Role.ACCOUNT, os.urandom(33))


def test_encode_rejects_non_role_prefix():
    with pytest.raises(WrongKeyType):
        encode(PREFIX_BYTE_SEED, os.urandom(32))
    with pytest.raises(WrongKeyType):
        encode(0x91, os.urandom(32))
    with pytest.raises(WrongKeyType):
        encode_seed(PREFIX_BYTE_PRIVATE, os.urandom(32))


def test_encode_accepts_raw_role_prefix_byte():
    data = os.urandom(32)
    assert encode(Role.USER.prefix, data) == encode(Role.USER, data)


def test_decode_empty():
    with pytest.raises(EmptyOrMalformedInput):
        decode(Role.ACCOUNT, "")
    with pytest.raises(EmptyOrMalformedInput):
        decode_seed("")


def test_decode_bad_alphabet():
    encoded = encode(Role.ACCOUNT, os.urandom(32))
    with pytest.raises(InvalidEncoding):
        decode(Role.ACCOUNT, encoded.lower())
    with pytest.raises(InvalidEncoding):
        decode(Role.ACCOUNT, encoded[:10] + "1" + encoded[11:])


def test_decode_bad_length():
    encoded = encode(Role.ACCOUNT, os.urandom(32))
    # 57 characters is not a valid base32 length
    with pytest.raises(InvalidEncoding):
        decode(Role.ACCOUNT, encoded + "A")


def test_decode_wrong_type():
    encoded = encode(Role.ACCOUNT, os.urandom(32))
    with pytest.raises(WrongKeyType):
        decode(Role.USER, encoded)


@pytest.mark.parametrize("role", list(Role))
def test_decode_wrong_type_every_pair(role):
    encoded = encode(role, os.urandom(32))
    for other in Role:
        if other is role:
            continue
        with pytest.raises(WrongKeyType):
            decode(other, encoded)


def test_seed_through_public_path_fails():
    seed = encode_seed(Role.USER, os.urandom(32))
    with pytest.raises(WrongKeyType):
        decode(Role.USER, seed)


def test_public_through_seed_path_fails():
    public = encode(Role.USER, os.urandom(32))
    with pytest.raises(CodecError):
        decode_seed(public)


def test_private_through_seed_path_fails():
    private = encode(PREFIX_BYTE_PRIVATE, os.urandom(64))
    with pytest.raises(WrongKeyType):
        decode_seed(private)


def test_seed_with_reserved_role():
    # seed prefix packing a code that is not a role (15 = private)
    p = 15 << 3
    raw = bytes([PREFIX_BYTE_SEED | (p >> 5), (p << 3) & 0xFF]) + os.urandom(32)
    encoded = b32e(raw + crc16_bytes(raw))

    decoded = decode_seed(encoded)
    assert decoded.prefix == p
    with pytest.raises(WrongKeyType):
        decoded.role


def test_bad_crc_fixed_position():
    for _ in range(1000):
        encoded = encode(Role.ACCOUNT, os.urandom(32))
        replacement = "Z" if encoded[6] == "X" else "X"
        corrupted = encoded[:6] + replacement + encoded[7:]
        with pytest.raises(ChecksumMismatch):
            decode(Role.ACCOUNT, corrupted)


def _public(rnd):
    role = rnd.choice(list(Role))
    encoded = encode(role, rnd.randbytes(32))
    return encoded, lambda s: decode(role, s)


def _private(rnd):
    encoded = encode(PREFIX_BYTE_PRIVATE, rnd.randbytes(64))
    return encoded, lambda s: decode(PREFIX_BYTE_PRIVATE, s)


def _seed(rnd):
    encoded = encode_seed(rnd.choice(list(Role)), rnd.randbytes(rnd.choice([32, 64])))
    return encoded, decode_seed


@pytest.mark.parametrize("make", [_public, _private, _seed])
def test_bad_crc_random_character(make):
    rnd = random.Random(4648)
    for _ in range(1000):
        encoded, decoder = make(rnd)
        pos = rnd.randrange(len(encoded))
        replacement = rnd.choice(ALPHABET.replace(encoded[pos], ""))
        corrupted = encoded[:pos] + replacement + encoded[pos + 1:]
        if pos < len(encoded) - 1:
            with pytest.raises(ChecksumMismatch):
                decoder(corrupted)
        else:
            # the last character may only touch unused bits
            with pytest.raises((ChecksumMismatch, InvalidEncoding)):
                decoder(corrupted)


@pytest.mark.parametrize("make", [_public, _private, _seed])
def test_every_last_character_change_rejected(make):
    rnd = random.Random(5)
    for _ in range(20):
        encoded, decoder = make(rnd)
        for c in ALPHABET.replace(encoded[-1], ""):
            with pytest.raises((ChecksumMismatch, InvalidEncoding)):
                decoder(encoded[:-1] + c)


def test_private_unused_bits_rejected():
    encoded = encode(PREFIX_BYTE_PRIVATE, os.urandom(64))
    # 108 characters carry 540 bits for 536 bits of data: the low 4 bits
    # of the last character are unused and always zero
    last = ALPHABET.index(encoded[-1])
    for unused in range(1, 16):
        corrupted = encoded[:-1] + ALPHABET[last | unused]
        with pytest.raises(InvalidEncoding):
            decode(PREFIX_BYTE_PRIVATE, corrupted)


def test_checksum_checked_before_prefix():
    encoded = encode(Role.ACCOUNT, os.urandom(32))
    # 'U' would be a valid user prefix, but the checksum no longer matches
    with pytest.raises(ChecksumMismatch):
        decode(Role.USER, "U" + encoded[1:])


@pytest.mark.parametrize("role", list(Role))
def test_role_of(role):
    assert role_of(encode(role, os.urandom(32))) is role
    assert role_of(encode_seed(role, os.urandom(32))) is role


def test_role_of_rejects_private_and_garbage():
    with pytest.raises(WrongKeyType):
        role_of(encode(PREFIX_BYTE_PRIVATE, os.urandom(64)))
    with pytest.raises(WrongKeyType):
        role_of("BadSeed")
    with pytest.raises(WrongKeyType):
        role_of("1A")
    with pytest.raises(EmptyOrMalformedInput):
        role_of("")


def test_is_valid_public_key():
    public = encode(Role.SERVER, os.urandom(32))
    assert is_valid_public_key(public)
    assert is_valid_public_key(public, Role.SERVER)
    assert not is_valid_public_key(public, Role.CLUSTER)
    assert not is_valid_public_key(encode_seed(Role.SERVER, os.urandom(32)))
    assert not is_valid_public_key("")
    assert not is_valid_public_key("N" * 56)


def test_codec_errors_are_value_errors():
    with pytest.raises(ValueError):
        decode(Role.ACCOUNT, "")


@pytest.mark.parametrize("role", list(Role))
def test_decode_public_key_any_role(role):
    data = os.urandom(32)
    assert decode_public_key(encode(role, data)) == (role, data)


def test_decode_public_key_checks_checksum_before_role():
    encoded = encode(Role.USER, os.urandom(32))
    # 'B' is a reserved code; corruption must still read as a checksum failure
    with pytest.raises(ChecksumMismatch):
        decode_public_key("B" + encoded[1:])


def test_decode_public_key_rejects_seed_and_private():
    with pytest.raises(WrongKeyType):
        decode_public_key(encode_seed(Role.USER, os.urandom(32)))
    with pytest.raises(WrongKeyType):
        decode_public_key(encode(PREFIX_BYTE_PRIVATE, os.urandom(64)))
