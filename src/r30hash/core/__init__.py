"""
Core foundation: frozen parameters, byte helpers, hex encoding, receipts.
"""

from .registry import param_registry, RegistryError
from .hashing import blake3_hash, hex_string
from .bytesio import (
    encode_length,
    xor_bytes,
    iter_bits_msb_first,
    pack_bits_msb_first,
    SerializationError
)
from .receipts import (
    Receipts,
    assert_double_run_equal,
    ReceiptError,
    DeterminismError
)

__all__ = [
    # Registry
    "param_registry",
    "RegistryError",

    # Hashing
    "blake3_hash",
    "hex_string",

    # Byte helpers
    "encode_length",
    "xor_bytes",
    "iter_bits_msb_first",
    "pack_bits_msb_first",
    "SerializationError",

    # Receipts
    "Receipts",
    "assert_double_run_equal",
    "ReceiptError",
    "DeterminismError",
]
