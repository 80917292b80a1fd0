"""Bit and byte helpers for the SHA-256 circuit, plus a reference hash."""

from __future__ import annotations

import hashlib
from collections.abc import Iterable, Sequence

BLOCK_BITS = 512
_LENGTH_FIELD_BITS = 64


def sha256_hex(message: bytes) -> str:
    """Return the SHA-256 digest of ``message`` as lower-case hex."""
    return hashlib.sha256(message).hexdigest()


def bytes_to_bits(data: Iterable[int]) -> list[bool]:
    """Expand bytes into bits, most significant bit of each byte first."""
    return [bool((byte >> (7 - shift)) & 1) for byte in data for shift in range(8)]


def bits_to_bytes(bits: Sequence[bool]) -> bytes:
    """Pack bits (most significant first within each byte) into bytes."""
    if len(bits) % 8:
        raise ValueError("The bits length must be a multiple of 8")
    return bytes(
        sum(1 << (7 - shift) for shift, bit in enumerate(bits[start:start + 8]) if bit)
        for start in range(0, len(bits), 8)
    )


def padded_bits(bytes_len: int) -> list[bool]:
    """Return the SHA-256 padded message bits for a message of ``bytes_len`` bytes.

    The message itself is represented by zero bits; only the padding
    (the 0x80 marker, zero fill and the 64-bit big-endian bit length)
    carries information.
    """
    if bytes_len < 0:
        raise ValueError("Message length must not be negative")
    padding = bytearray(bytes_len)
    padding.append(0x80)
    while (len(padding) * 8 + _LENGTH_FIELD_BITS) % BLOCK_BITS:
        padding.append(0x00)
    padding += (bytes_len * 8).to_bytes(8, "big")
    return bytes_to_bits(padding)