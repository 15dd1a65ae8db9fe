"""
Stream Reader & Padder

Splits a binary byte source into 32-byte blocks and injects the length.

Padding (frozen):
  - A full 32-byte read is never final; another read always follows.
  - The final (short, possibly empty) read is zero-filled to 32 bytes.
  - With >= 8 padding bytes, the last 8 bytes carry the total byte count
    (unsigned 64-bit, big-endian).
  - With < 8 padding bytes (25..31 content bytes) the block stays zero-padded
    and one extra all-zero block carries the length.

Total byte count wraps modulo 2^64.
"""

import logging
from typing import BinaryIO, Iterator

from .core.registry import BLOCK_BYTES, LENGTH_FIELD_BYTES, LENGTH_MASK
from .core.bytesio import encode_length

logger = logging.getLogger(__name__)

PATH_EMBEDDED = "embedded"
PATH_EXTRA_BLOCK = "extra_block"


def padding_path(length: int) -> str:
    """
    Classify how a message of length bytes is terminated.

    Returns:
        str: "embedded" if the length field fits in the last content
            block, "extra_block" if a synthetic length block is appended.
    """
    tail = length % BLOCK_BYTES
    if BLOCK_BYTES - tail >= LENGTH_FIELD_BYTES:
        return PATH_EMBEDDED
    return PATH_EXTRA_BLOCK


def block_count(length: int) -> int:
    """Number of blocks iter_blocks produces for a length-byte message."""
    count = length // BLOCK_BYTES + 1
    if padding_path(length) == PATH_EXTRA_BLOCK:
        count += 1
    return count


def pad_final(tail: bytes, total: int) -> list[bytes]:
    """
    Pad the final short read into one or two terminal blocks.

    Args:
        tail: Content of the final read (0..31 bytes).
        total: Total bytes in the stream, including tail.

    Returns:
        list[bytes]: One block (length embedded) or two blocks (zero-padded
            content block, then all-zero length block).

    Raises:
        ValueError: If tail is a full block or longer.
    """
    if len(tail) >= BLOCK_BYTES:
        raise ValueError(f"Final read must be shorter than {BLOCK_BYTES} bytes, got {len(tail)}")

    block = bytearray(BLOCK_BYTES)
    block[:len(tail)] = tail

    length_field = encode_length(total)
    if BLOCK_BYTES - len(tail) >= LENGTH_FIELD_BYTES:
        block[-LENGTH_FIELD_BYTES:] = length_field
        return [bytes(block)]

    length_block = bytearray(BLOCK_BYTES)
    length_block[-LENGTH_FIELD_BYTES:] = length_field
    return [bytes(block), bytes(length_block)]


def read_block(source: BinaryIO) -> bytes:
    """
    Read up to BLOCK_BYTES from source, looping over short reads.

    Returns fewer than BLOCK_BYTES bytes only at end of input.

    Raises:
        SourceReadError: If source.read fails or reports no data available.
    """
    buf = bytearray()
    while len(buf) < BLOCK_BYTES:
        try:
            chunk = source.read(BLOCK_BYTES - len(buf))
        except (OSError, ValueError) as exc:
            raise SourceReadError(f"Failed to read input stream: {exc}") from exc
        if chunk is None:
            # Non-blocking raw stream with nothing ready
            raise SourceReadError("Input stream returned no data (non-blocking source)")
        if not chunk:
            break
        buf.extend(chunk)
    return bytes(buf)


def iter_blocks(source: BinaryIO) -> Iterator[bytes]:
    """
    Yield padded 32-byte blocks from source in stream order.

    The source is read forward only and never after the final short read.
    An empty source yields a single all-zero block.

    Raises:
        SourceReadError: On any read fault. Blocks already yielded stand.
    """
    total = 0
    count = 0
    while True:
        chunk = read_block(source)
        total = (total + len(chunk)) & LENGTH_MASK
        if len(chunk) == BLOCK_BYTES:
            count += 1
            yield chunk
            continue

        final = pad_final(chunk, total)
        logger.debug(
            "Final read of %d bytes after %d full blocks, total=%d, path=%s",
            len(chunk), count, total,
            PATH_EMBEDDED if len(final) == 1 else PATH_EXTRA_BLOCK
        )
        yield from final
        return


class SourceReadError(OSError):
    """Raised when the byte source fails mid-stream; no digest is produced."""
    pass
