"""
nkey_core.crc16
---------------
CRC-16/XMODEM (poly 0x1021, init 0x0000, no reflection, no final XOR).

Used to catch transcription errors in encoded keys. It is not an
integrity mechanism against tampering.
"""

from __future__ import annotations

_POLY = 0x1021


def _make_table():
    table = []
    for i in range(256):
        crc = i << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = ((crc << 1) ^ _POLY) & 0xFFFF
            else:
                crc = (crc << 1) & 0xFFFF
        table.append(crc)
    return tuple(table)


_TABLE = _make_table()


def crc16(data: bytes) -> int:
    crc = 0
    for b in data:
        crc = ((crc << 8) & 0xFFFF) ^ _TABLE[((crc >> 8) ^ b) & 0xFF]
    return crc


def crc16_bytes(data: bytes) -> bytes:
    # keys carry the checksum little-endian
    return crc16(data).to_bytes(2, "little")


def validate_crc16(data: bytes, expected: int) -> bool:
    return crc16(data) == expected
