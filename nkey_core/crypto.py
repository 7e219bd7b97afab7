"""
nkey_core.crypto
----------------
Ed25519 primitives used by NKey, backed by `cryptography`.

- Keypair derivation from a 32-byte seed
- Deterministic signing with the expanded (seed || public) private key
- Verification that answers True/False instead of raising
"""

from __future__ import annotations
from typing import Tuple
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric import ed25519

SEED_SIZE = 32
PUBLIC_KEY_SIZE = 32
PRIVATE_KEY_SIZE = 64
SIGNATURE_SIZE = 64


# --------- Ed25519 (derive/sign/verify) ----------
def ed25519_from_seed(seed: bytes) -> Tuple[bytes, bytes]:
    """Return (public_key, private_key) for a raw seed.

    private_key is the 64-byte NaCl form: seed followed by public key.
    """
    sk = ed25519.Ed25519PrivateKey.from_private_bytes(bytes(seed))
    pub = sk.public_key().public_bytes_raw()
    return pub, bytes(seed) + pub


def ed25519_sign(priv_raw: bytes, data: bytes) -> bytes:
    # Only the seed half is needed; the public half is derived again
    sk = ed25519.Ed25519PrivateKey.from_private_bytes(bytes(priv_raw[:SEED_SIZE]))
    return sk.sign(data)


def ed25519_verify(pub_raw: bytes, sig: bytes, data: bytes) -> bool:
    if len(sig) != SIGNATURE_SIZE:
        return False
    try:
        ed25519.Ed25519PublicKey.from_public_bytes(pub_raw).verify(bytes(sig), data)
        return True
    except InvalidSignature:
        return False
