"""
nkey_core.errors
----------------
Exception hierarchy for NKey encoding, decoding and key handling.

Codec errors subclass ValueError so callers that only care about
"bad input" can catch the builtin.
"""


class NKeyError(Exception):
    pass


class CodecError(NKeyError, ValueError):
    pass


class InvalidPayloadSize(CodecError):
    pass


class EmptyOrMalformedInput(CodecError):
    pass


class InvalidEncoding(CodecError):
    pass


class ChecksumMismatch(CodecError):
    pass


class WrongKeyType(CodecError):
    pass


class InvalidArgument(NKeyError, ValueError):
    """Raised by key factories when a seed or public key string is unusable."""


class IllegalState(NKeyError, RuntimeError):
    """Raised when a private-only operation is attempted on a public-only key."""
