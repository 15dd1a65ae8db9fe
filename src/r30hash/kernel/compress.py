"""
Kernel Component: Compression Function (Rule 30 engine)

Maps one 32-byte block (already combined with the chain state) to 32
output bytes by sampling the center column of a Rule 30 automaton.

Schedule:
  1. key = block ++ KEY_TERMINATOR, written MSB-first at KEY_START
  2. TOTAL_ROWS generations, each restricted to active_window(row)
  3. center cell read BEFORE each row's update
  4. rows < SKIP_ROWS are warm-up; afterwards every odd row contributes
     one output bit, MSB-first per byte

Pure: a fresh cell array per call, no shared state.
"""

from ..core.registry import (
    BLOCK_BYTES,
    CELLS_MID,
    HASH_BITS,
    KEY_START,
    KEY_TERMINATOR,
    MAX_WORDS,
    SKIP_ROWS,
    TOTAL_ROWS,
)
from ..core.bytesio import pack_bits_msb_first
from .cells import new_cells, write_bits, read_cell, rule30_step
from .window import active_window


def seed_key(block: bytes) -> bytes:
    """Return the 33-byte seed for block."""
    return bytes(block) + bytes([KEY_TERMINATOR])


def center_column(block: bytes) -> list[int]:
    """
    Run the automaton seeded from block and return the sampled center bits.

    Returns:
        list[int]: HASH_BITS values in {0, 1}, in sampling order.

    Raises:
        ValueError: If block is not BLOCK_BYTES long.
    """
    if len(block) != BLOCK_BYTES:
        raise ValueError(f"Block must be {BLOCK_BYTES} bytes, got {len(block)}")

    cells = new_cells(MAX_WORDS)
    write_bits(cells, KEY_START, seed_key(block))

    samples = []
    for row in range(TOTAL_ROWS):
        start, end = active_window(row)
        mid = read_cell(cells, CELLS_MID)
        rule30_step(cells, start, end)
        if row >= SKIP_ROWS and row % 2 == 1:
            samples.append(mid)

    # TOTAL_ROWS - SKIP_ROWS is even, so exactly half the tail rows are odd
    assert len(samples) == HASH_BITS
    return samples


def compress_block(block: bytes) -> bytes:
    """
    Compress one 32-byte block to 32 bytes.

    Args:
        block: BLOCK_BYTES bytes (message block XOR chain state).

    Returns:
        bytes: HASH_BITS // 8 bytes of center-column output.

    Raises:
        ValueError: If block is not BLOCK_BYTES long.

    Example:
        >>> compress_block(bytes(32)).hex()
        'fa5f14c702f96e8bb547d7c4184fe1a2462b3b3f6488d51613623ebd0b5b8179'
    """
    return pack_bits_msb_first(center_column(block))
