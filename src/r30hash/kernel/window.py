"""
Kernel Component: Active Window (light cone)

Per-row word span that has to be updated so the center column stays exact.

  - First half of the schedule: forward light cone of the seed. Nonzero
    cells sit within KEY_BITS / 2 + row of the midpoint.
  - Second half: backward light cone of the samples still to be taken.
    A cell further than TOTAL_ROWS - row from the midpoint can no longer
    reach it before the last row.

Both spans get a 2-cell margin on each side and are rounded outward to
whole words.
"""

from ..core.registry import CELLS_MID, KEY_BITS, MAX_WORDS, TOTAL_ROWS


def active_width(row: int) -> int:
    """
    Width in cells of the live region for row.

    Raises:
        ValueError: If row is outside [0, TOTAL_ROWS).
    """
    if not 0 <= row < TOTAL_ROWS:
        raise ValueError(f"Row {row} outside schedule [0, {TOTAL_ROWS})")

    if row >= TOTAL_ROWS // 2:
        return 2 * (TOTAL_ROWS - row) + 2
    return KEY_BITS + 2 * row


def active_window(row: int) -> tuple[int, int]:
    """
    Return the word range [start, end) to update at row.

    Invariant:
        0 <= start < end <= MAX_WORDS for every row in [0, TOTAL_ROWS).
    """
    half = active_width(row) // 2 + 2
    start = (CELLS_MID - half) >> 6
    end = (CELLS_MID + half + 63) >> 6
    return (max(start, 0), min(end, MAX_WORDS))
