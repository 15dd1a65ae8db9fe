"""
Core Component: Hex Encoding & Receipt Hashing

hex_string renders R30 digests for display.
blake3_hash commits receipts and the parameter registry.

No seeding, no randomness, no timestamps.
"""

import blake3


def hex_string(data: bytes) -> str:
    """
    Convert bytes to a lowercase hexadecimal string.

    Two characters per byte, high nibble first.

    Example:
        >>> hex_string(b"\\x00\\xab\\xff")
        '00abff'
    """
    return memoryview(data).hex()


def blake3_hash(data: bytes) -> str:
    """
    Return hex-encoded BLAKE3 digest of the byte stream.

    Args:
        data: Raw bytes to hash.

    Returns:
        str: Hexadecimal digest (64 characters for BLAKE3-256).

    Notes:
        - No seeding or personalization.
        - Output is always lowercase hex.
        - Used for receipts only; R30 digests never pass through here.

    Example:
        >>> blake3_hash(b"test")
        '4878ca0425c739fa427f7eda20fe845f6b2e46ba5fe2a14df5b1e32f50603215'
    """
    hasher = blake3.blake3()
    hasher.update(data)
    return hasher.hexdigest()
