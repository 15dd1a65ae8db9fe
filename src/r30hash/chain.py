"""
Chaining Driver

Feed-forward chaining of compression outputs into a 32-byte state:

    S_0     = 32 zero bytes
    S_{i+1} = S_i XOR compress(B_i XOR S_i)

Blocks are applied strictly in stream order.
"""

import logging
from typing import Iterable

from .core.registry import BLOCK_BYTES, HASH_BYTES, LENGTH_MASK
from .core.bytesio import xor_bytes
from .core.hashing import hex_string
from .kernel.compress import compress_block
from .stream import pad_final

logger = logging.getLogger(__name__)


def initial_state() -> bytes:
    return bytes(HASH_BYTES)


def chain_block(state: bytes, block: bytes) -> bytes:
    """
    Fold one padded block into the chain state.

    Args:
        state: Current HASH_BYTES state.
        block: BLOCK_BYTES padded block.

    Returns:
        bytes: New state.
    """
    return xor_bytes(state, compress_block(xor_bytes(block, state)))


def digest_blocks(blocks: Iterable[bytes]) -> bytes:
    """
    Run the chain over blocks and return the final state.

    Errors raised while producing blocks propagate unchanged; no partial
    state escapes.
    """
    state = initial_state()
    count = 0
    for block in blocks:
        state = chain_block(state, block)
        count += 1
    logger.debug("Chained %d blocks", count)
    return state


class R30Hasher:
    """
    Incremental R30 hash object with a hashlib-style interface.

    A completed 32-byte block is compressed as soon as it arrives, since a
    full block is never the terminal one. At most 31 bytes stay buffered.
    digest() pads a copy of the buffered tail and leaves the hasher usable.

    Example:
        >>> h = R30Hasher()
        >>> h.update(b"hello, ")
        >>> h.update(b"world")
        >>> h.hexdigest()
        'b91956bc1e5b1937b48c364b199ca70879c32cc22da67e3ff8411aea894c3d9f'
    """

    name = "r30"
    digest_size = HASH_BYTES
    block_size = BLOCK_BYTES

    def __init__(self, data: bytes = b""):
        self._state = initial_state()
        self._buffer = bytearray()
        self._length = 0
        if data:
            self.update(data)

    def update(self, data: bytes) -> None:
        data = bytes(memoryview(data))
        self._length = (self._length + len(data)) & LENGTH_MASK
        self._buffer.extend(data)

        n_full = len(self._buffer) // BLOCK_BYTES
        for i in range(n_full):
            block = bytes(self._buffer[i * BLOCK_BYTES:(i + 1) * BLOCK_BYTES])
            self._state = chain_block(self._state, block)
        del self._buffer[:n_full * BLOCK_BYTES]

    def digest(self) -> bytes:
        state = self._state
        for block in pad_final(bytes(self._buffer), self._length):
            state = chain_block(state, block)
        return state

    def hexdigest(self) -> str:
        return hex_string(self.digest())

    def copy(self) -> "R30Hasher":
        other = R30Hasher()
        other._state = self._state
        other._buffer = bytearray(self._buffer)
        other._length = self._length
        return other
