"""
R30 Hash

256-bit digest built on the center column of the Rule 30 cellular
automaton, chained over 32-byte blocks.

Experimental. Not a vetted cryptographic primitive.
"""

__version__ = "0.1.0"

from .core.hashing import hex_string
from .stream import SourceReadError
from .chain import R30Hasher
from .digest import (
    digest,
    digest_bytes,
    digest_text,
    digest_stream,
    hexdigest_text,
    new
)

__all__ = [
    "digest",
    "digest_bytes",
    "digest_text",
    "digest_stream",
    "hexdigest_text",
    "hex_string",
    "new",
    "R30Hasher",
    "SourceReadError",
]
