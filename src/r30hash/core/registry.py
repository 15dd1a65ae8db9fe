"""
Core Component: Parameter Registry

Frozen constants for the R30 digest.
Block geometry, length field layout and automaton sizing are fixed here
and derived once at import time. Nothing depends on message content.

No randomness, no environment leakage, no optionals.
"""

# Block and digest geometry
BLOCK_BYTES = 32
HASH_BYTES = 32
LENGTH_FIELD_BYTES = 8
LENGTH_MASK = (1 << (LENGTH_FIELD_BYTES * 8)) - 1

# Seed = block ++ terminator
KEY_TERMINATOR = 0x01
KEY_BYTES = BLOCK_BYTES + 1
KEY_BITS = KEY_BYTES * 8

# Automaton schedule
RULE = 30
HASH_BITS = HASH_BYTES * 8
SKIP_ROWS = KEY_BITS * 7
TOTAL_ROWS = SKIP_ROWS + HASH_BITS * 2

# Packed cell array (64-bit words, rounded up)
WORD_BITS = 64
WORD_MASK = (1 << WORD_BITS) - 1
MAX_WORDS = (2 + KEY_BITS + SKIP_ROWS + HASH_BITS * 2 + WORD_BITS - 1) // WORD_BITS
MAX_CELLS = MAX_WORDS * WORD_BITS
CELLS_MID = MAX_CELLS // 2
KEY_START = (MAX_CELLS - KEY_BITS) // 2


def param_registry() -> dict:
    """
    Returns a frozen mapping of all constants used by the digest.

    Keys and values are JSON-serializable primitives.
    This registry is hashed into every receipt to prove parametric consistency.

    Returns:
        dict: Parameter mapping with exact keys and values.

    Raises:
        RegistryError: If any required key is missing (internal consistency check).
    """
    registry = {
        "algorithm": "R30",
        "rule": RULE,

        # Stream blocking and length injection
        "block_bytes": BLOCK_BYTES,
        "hash_bytes": HASH_BYTES,
        "length_field_bytes": LENGTH_FIELD_BYTES,
        "length_byteorder": "big",

        # Seed layout (bits are written MSB-first)
        "key_terminator": KEY_TERMINATOR,
        "key_bits": KEY_BITS,
        "key_start": KEY_START,

        # Automaton schedule
        "skip_rows": SKIP_ROWS,
        "total_rows": TOTAL_ROWS,
        "sample_parity": "odd",

        # Cell array
        "word_bits": WORD_BITS,
        "max_words": MAX_WORDS,
        "max_cells": MAX_CELLS,
        "cells_mid": CELLS_MID,

        # Receipts
        "receipt_hash_algo": "BLAKE3",
    }

    required_keys = {
        "algorithm", "rule", "block_bytes", "hash_bytes",
        "length_field_bytes", "length_byteorder", "key_terminator",
        "key_bits", "key_start", "skip_rows", "total_rows", "sample_parity",
        "word_bits", "max_words", "max_cells", "cells_mid",
        "receipt_hash_algo",
    }

    actual_keys = set(registry.keys())
    if actual_keys != required_keys:
        missing = required_keys - actual_keys
        extra = actual_keys - required_keys
        raise RegistryError(
            f"param_registry() key mismatch. Missing: {missing}, Extra: {extra}"
        )

    return registry


class RegistryError(Exception):
    """Raised when param_registry() has missing or unexpected keys."""
    pass
