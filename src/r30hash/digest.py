"""
Public digest operations.

    digest_bytes(data)            -> 32 bytes
    digest_text(text, encoding)   -> 32 bytes
    hexdigest_text(text)          -> 64-char lowercase hex (platform encoding)
    digest_stream(source)         -> 32 bytes, SourceReadError on read fault
    digest(message, encoding)     -> dispatches on the message type
"""

import io
import locale
from typing import BinaryIO

from .chain import R30Hasher, digest_blocks
from .core.hashing import hex_string
from .stream import iter_blocks


def default_encoding() -> str:
    """Platform default text encoding used when none is given."""
    return locale.getpreferredencoding(False)


def digest_stream(source: BinaryIO) -> bytes:
    """
    Digest everything readable from a binary file-like source.

    Raises:
        SourceReadError: If the source reports a read fault.
    """
    return digest_blocks(iter_blocks(source))


def digest_bytes(data: bytes) -> bytes:
    """
    Digest a bytes-like object.

    Example:
        >>> digest_bytes(b"").hex()
        'fa5f14c702f96e8bb547d7c4184fe1a2462b3b3f6488d51613623ebd0b5b8179'
    """
    return digest_stream(io.BytesIO(memoryview(data).tobytes()))


def digest_text(text: str, encoding: str) -> bytes:
    """
    Encode text with encoding and digest the result.

    Raises:
        LookupError: If encoding is unknown.
        UnicodeEncodeError: If text cannot be encoded.
    """
    return digest_bytes(text.encode(encoding))


def hexdigest_text(text: str) -> str:
    """
    Digest text under the platform default encoding, as lowercase hex.

    Example:
        >>> hexdigest_text("hello, world")
        'b91956bc1e5b1937b48c364b199ca70879c32cc22da67e3ff8411aea894c3d9f'
    """
    return hex_string(digest_text(text, default_encoding()))


def digest(message, encoding: str | None = None):
    """
    Digest bytes, a binary stream or text.

    Args:
        message: bytes/bytearray/memoryview, a binary file-like object
            with read(), or str.
        encoding: Only valid for str messages.

    Returns:
        bytes for bytes-like and stream input and for str with an explicit
        encoding; the lowercase hex string for str without one.

    Raises:
        TypeError: For unsupported message types, or an encoding given
            with non-text input.
        SourceReadError: If a stream source fails.
    """
    if isinstance(message, str):
        if encoding is None:
            return hexdigest_text(message)
        return digest_text(message, encoding)

    if encoding is not None:
        raise TypeError("encoding is only accepted for str messages")

    if isinstance(message, (bytes, bytearray, memoryview)):
        return digest_bytes(message)
    if hasattr(message, "read"):
        return digest_stream(message)

    raise TypeError(
        f"Cannot digest {type(message).__name__}; expected bytes-like, str or binary stream"
    )


def new(data: bytes = b"") -> R30Hasher:
    """hashlib-style constructor."""
    return R30Hasher(data)
