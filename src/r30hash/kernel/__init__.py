"""
Kernel: Packed Cells, Light-Cone Window & Compression

Pure operations behind the R30 compression function.

Components:
  - cells: packed 64-bit word array, bit write/read, Rule 30 step
  - window: per-row active word range
  - compress: center-column sampler and compress_block
"""

from .cells import (
    new_cells,
    write_bits,
    read_cell,
    rule30_step
)
from .window import (
    active_width,
    active_window
)
from .compress import (
    seed_key,
    center_column,
    compress_block
)

__all__ = [
    # Cells
    "new_cells",
    "write_bits",
    "read_cell",
    "rule30_step",

    # Window
    "active_width",
    "active_window",

    # Compression
    "seed_key",
    "center_column",
    "compress_block",
]
