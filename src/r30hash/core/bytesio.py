"""
Core Component: Byte Helpers (Big-Endian, MSB-First)

Stable byte-level encodings used by the padder, chain and compressor.

Bit mapping (frozen):
  - Within each byte: bit 7 -> position 0, bit 6 -> position 1, ..., bit 0 -> position 7
  - Length field: unsigned 64-bit, big-endian (most significant byte first)
"""

from typing import Iterator

from .registry import LENGTH_FIELD_BYTES, LENGTH_MASK


def encode_length(total: int) -> bytes:
    """
    Encode a running byte count as the trailing length field.

    Args:
        total: Total bytes read so far. Wraps modulo 2^64.

    Returns:
        bytes: LENGTH_FIELD_BYTES bytes, big-endian.

    Raises:
        SerializationError: If total is negative.
    """
    if total < 0:
        raise SerializationError(f"Length must be non-negative, got {total}")
    return (total & LENGTH_MASK).to_bytes(LENGTH_FIELD_BYTES, byteorder='big')


def xor_bytes(a: bytes, b: bytes) -> bytes:
    """
    Byte-wise XOR of two equal-length sequences.

    Raises:
        SerializationError: If lengths differ.
    """
    if len(a) != len(b):
        raise SerializationError(
            f"XOR operand length mismatch: {len(a)} != {len(b)}"
        )
    n = len(a)
    x = int.from_bytes(a, 'big') ^ int.from_bytes(b, 'big')
    return x.to_bytes(n, 'big')


def iter_bits_msb_first(data: bytes) -> Iterator[int]:
    """Yield every bit of data, most significant bit of each byte first."""
    for byte in data:
        for shift in range(7, -1, -1):
            yield (byte >> shift) & 1


def pack_bits_msb_first(bits: list[int]) -> bytes:
    """
    Pack a bit sequence into bytes; bit k lands in byte k // 8 at
    position 7 - (k % 8).

    Raises:
        SerializationError: If len(bits) is not a multiple of 8 or a
            value other than 0/1 appears.
    """
    if len(bits) % 8 != 0:
        raise SerializationError(f"Bit count {len(bits)} is not a multiple of 8")

    out = bytearray(len(bits) // 8)
    for k, bit in enumerate(bits):
        if bit not in (0, 1):
            raise SerializationError(f"Bit {k} is not 0/1: {bit!r}")
        if bit:
            out[k >> 3] |= 1 << (7 - (k & 7))
    return bytes(out)


class SerializationError(Exception):
    """Raised when a byte helper receives mismatched or malformed operands."""
    pass
