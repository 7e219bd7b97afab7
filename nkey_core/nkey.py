"""
nkey_core.nkey
--------------
NKey: an Ed25519 identity tagged with a role.

A key is either full (holds the seed, can sign and export its seed and
private key) or public-only (can only verify). Keys are created through the
classmethod factories and never change afterwards, except that clear() may
drop the seed and leave a public-only key behind. Code that shares a key
across threads should hand out public_only() copies instead of clearing.

    key = NKey.create_user()
    sig = key.sign(b"hello")
    NKey.from_public_key(key.get_public_key()).verify(b"hello", sig)  # True
"""

from __future__ import annotations
from typing import Optional
import threading

from . import codec
from .crypto import SEED_SIZE, ed25519_from_seed, ed25519_sign, ed25519_verify
from .errors import CodecError, IllegalState, InvalidArgument, InvalidPayloadSize
from .logger import get_logger
from .prefix import PREFIX_BYTE_PRIVATE, Role
from .utils import RandomSource, random_bytes

log = get_logger("NKey")


class NKey:
    __slots__ = ("_role", "_public", "_seed", "_lock")

    def __init__(self, role: Role, public_key: bytes, seed: Optional[bytes] = None):
        self._role = role
        self._public = bytes(public_key)
        self._seed = bytearray(seed) if seed is not None else None
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------
    @classmethod
    def create(cls, role: Role, rng: Optional[RandomSource] = None) -> "NKey":
        seed = random_bytes(SEED_SIZE, rng)
        if len(seed) != SEED_SIZE:
            raise InvalidPayloadSize(f"random source returned {len(seed)} bytes, need {SEED_SIZE}")
        key = cls.from_raw_seed(role, seed)
        log.debug(f"[CREATE] {role.name} {key.get_public_key()}")
        return key

    @classmethod
    def create_account(cls, rng: Optional[RandomSource] = None) -> "NKey":
        return cls.create(Role.ACCOUNT, rng)

    @classmethod
    def create_user(cls, rng: Optional[RandomSource] = None) -> "NKey":
        return cls.create(Role.USER, rng)

    @classmethod
    def create_server(cls, rng: Optional[RandomSource] = None) -> "NKey":
        return cls.create(Role.SERVER, rng)

    @classmethod
    def create_cluster(cls, rng: Optional[RandomSource] = None) -> "NKey":
        return cls.create(Role.CLUSTER, rng)

    @classmethod
    def create_operator(cls, rng: Optional[RandomSource] = None) -> "NKey":
        return cls.create(Role.OPERATOR, rng)

    @classmethod
    def from_raw_seed(cls, role: Role, seed: bytes) -> "NKey":
        if not isinstance(role, Role):
            raise InvalidArgument(f"not a role: {role!r}")
        if len(seed) != SEED_SIZE:
            raise InvalidArgument(f"seed must be {SEED_SIZE} bytes, got {len(seed)}")
        pub, _ = ed25519_from_seed(seed)
        return cls(role, pub, seed)

    @classmethod
    def from_seed(cls, seed: str) -> "NKey":
        """Build a full key from an encoded seed ("S" + role letter)."""
        try:
            decoded = codec.decode_seed(seed)
            role = decoded.role
        except CodecError as e:
            raise InvalidArgument(f"invalid seed: {e}") from e

        raw = decoded.bytes[:SEED_SIZE]
        key = cls.from_raw_seed(role, raw)
        # Seeds written as seed || public key must agree with the derived key
        embedded = decoded.bytes[SEED_SIZE:]
        if embedded and embedded != key._public:
            raise InvalidArgument("invalid seed: embedded public key does not match seed")
        return key

    @classmethod
    def from_public_key(cls, public_key: str) -> "NKey":
        try:
            role, raw = codec.decode_public_key(public_key)
        except CodecError as e:
            raise InvalidArgument(f"invalid public key: {e}") from e
        return cls(role, raw)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def type(self) -> Role:
        return self._role

    def get_type(self) -> Role:
        return self._role

    @property
    def is_public_only(self) -> bool:
        return self._seed is None

    @property
    def raw_public_key(self) -> bytes:
        return self._public

    @property
    def public_key(self) -> str:
        return self.get_public_key()

    def get_public_key(self) -> str:
        return codec.encode(self._role, self._public)

    def get_private_key(self) -> str:
        with self._lock:
            seed = self._require_seed("private key")
            return codec.encode(PREFIX_BYTE_PRIVATE, bytes(seed) + self._public)

    def get_seed(self) -> str:
        with self._lock:
            seed = self._require_seed("seed")
            return codec.encode_seed(self._role, bytes(seed) + self._public)

    # ------------------------------------------------------------------
    # Signing
    # ------------------------------------------------------------------
    def sign(self, data: bytes) -> bytes:
        with self._lock:
            seed = self._require_seed("signing")
            return ed25519_sign(seed, data)

    def verify(self, data: bytes, signature: bytes) -> bool:
        return ed25519_verify(self._public, signature, data)

    # ------------------------------------------------------------------
    # Seed lifetime
    # ------------------------------------------------------------------
    def public_only(self) -> "NKey":
        """A new public-only key for the same identity; this key is untouched."""
        return NKey(self._role, self._public)

    def clear(self) -> None:
        """Zero and drop the seed. The key stays usable for verification.

        Waits for any sign or export in progress, which then completes with
        the full seed; later calls raise IllegalState.
        """
        with self._lock:
            if self._seed is not None:
                for i in range(len(self._seed)):
                    self._seed[i] = 0
                self._seed = None

    def __enter__(self) -> "NKey":
        return self

    def __exit__(self, *exc) -> None:
        self.clear()

    def _require_seed(self, what: str) -> bytearray:
        if self._seed is None:
            raise IllegalState(f"{what} requires a seed; this is a public-only key")
        return self._seed

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NKey):
            return NotImplemented
        return self.get_public_key() == other.get_public_key()

    def __hash__(self) -> int:
        return hash(self.get_public_key())

    def __repr__(self) -> str:
        kind = "public" if self.is_public_only else "full"
        return f"NKey({self._role.name}, {self.get_public_key()}, {kind})"
