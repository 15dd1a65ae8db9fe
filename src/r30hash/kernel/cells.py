"""
Kernel Component: Packed Cell Array (WRITE / READ / RULE 30 STEP)

One-dimensional binary cell array packed into 64-bit words.

Word representation:
  - list[int] of length n_words
  - Each entry is a Python int holding 64 bits (masked to WORD_MASK)
  - Cell i lives in word i >> 6 at bit 63 - (i % 64)
  - Lower cell index = more significant bit; index grows to the right
"""

from ..core.registry import WORD_BITS, WORD_MASK
from ..core.bytesio import iter_bits_msb_first


def new_cells(n_words: int) -> list[int]:
    """Return a fresh all-zero array of n_words words."""
    if n_words <= 0:
        raise ValueError(f"Cell array needs at least one word, got {n_words}")
    return [0] * n_words


def write_bits(cells: list[int], start: int, data: bytes) -> None:
    """
    OR the bits of data into cells, MSB of each byte first, beginning at
    cell index start.

    Raises:
        ValueError: If the bits do not fit inside the array.
    """
    n_cells = len(cells) * WORD_BITS
    if start < 0 or start + len(data) * 8 > n_cells:
        raise ValueError(
            f"Bits [{start}, {start + len(data) * 8}) outside array of {n_cells} cells"
        )

    for offset, bit in enumerate(iter_bits_msb_first(data)):
        if bit:
            index = start + offset
            cells[index >> 6] |= 1 << (63 - (index & 63))


def read_cell(cells: list[int], index: int) -> int:
    """Return the value (0/1) of cell index."""
    return (cells[index >> 6] >> (63 - (index & 63))) & 1


def rule30_step(cells: list[int], start: int, end: int) -> None:
    """
    Advance words [start, end) one Rule 30 generation in place.

    next(c) = left(c) XOR (center(c) OR right(c))

    Words are swept left to right. The right neighbour of a word's last
    cell is the MSB of the following word, which has not been updated yet.
    The left neighbour of a word's first cell is carried from the previous
    word's pre-update LSB. The carry into word start is zero, as is the
    right neighbour of the last array word.

    Invariant:
        Only words [start, end) are written. Word start - 1 is never read.
    """
    last = len(cells) - 1
    carry_left = 0
    for i in range(start, end):
        w = cells[i]
        carry_right = cells[i + 1] >> 63 if i < last else 0
        right = ((w << 1) & WORD_MASK) | carry_right
        left = (w >> 1) | carry_left
        carry_left = (w << 63) & WORD_MASK
        cells[i] = left ^ (w | right)
