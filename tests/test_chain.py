"""
CHAIN VERIFICATION SUITE - Feed-Forward Driver & Incremental Hasher

Coverage:
  ✓ Single block: digest == compress(block) from zero state
  ✓ Feed-forward: S' = S XOR compress(B XOR S)
  ✓ Order sensitivity for permuted blocks
  ✓ R30Hasher == stream path for any update split
  ✓ digest() does not consume state; copy() is independent
"""

import io
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from r30hash.core import xor_bytes
from r30hash.kernel import compress_block
from r30hash.stream import iter_blocks
from r30hash.chain import (
    initial_state,
    chain_block,
    digest_blocks,
    R30Hasher,
)


def _stream_digest(data: bytes) -> bytes:
    return digest_blocks(iter_blocks(io.BytesIO(data)))


def test_initial_state_is_zero():
    assert initial_state() == bytes(32)


def test_single_block_from_zero_state():
    block = bytes(range(32))
    assert digest_blocks([block]) == compress_block(block)


def test_chain_block_feed_forward():
    state = bytes(range(32))
    block = b"\x5a" * 32
    expected = xor_bytes(state, compress_block(xor_bytes(block, state)))
    assert chain_block(state, block) == expected


def test_two_blocks_manual():
    b0 = b"\x01" * 32
    b1 = b"\x02" * 32
    s1 = compress_block(b0)
    s2 = xor_bytes(s1, compress_block(xor_bytes(b1, s1)))
    assert digest_blocks([b0, b1]) == s2


def test_block_order_matters():
    b0 = bytes(range(32))
    b1 = bytes(range(32, 64))
    b2 = b"\xee" * 32
    assert digest_blocks([b0, b1, b2]) != digest_blocks([b1, b0, b2])
    assert digest_blocks([b0, b1]) != digest_blocks([b1, b0])


def test_message_block_permutation_changes_digest():
    a = b"A" * 32
    b = b"B" * 32
    assert _stream_digest(a + b) != _stream_digest(b + a)


def test_hasher_matches_stream_for_any_split():
    data = bytes((i * 7) & 0xff for i in range(97))
    expected = _stream_digest(data)
    for split in (1, 5, 31, 32, 33, 64, 97):
        h = R30Hasher()
        for i in range(0, len(data), split):
            h.update(data[i:i + split])
        assert h.digest() == expected


def test_hasher_boundary_lengths():
    for n in (0, 24, 25, 31, 32, 33, 64):
        data = bytes(range(n))
        assert R30Hasher(data).digest() == _stream_digest(data)


def test_hasher_digest_does_not_consume():
    h = R30Hasher(b"hello, ")
    first = h.digest()
    assert h.digest() == first
    h.update(b"world")
    assert h.hexdigest() == (
        "b91956bc1e5b1937b48c364b199ca70879c32cc22da67e3ff8411aea894c3d9f"
    )


def test_hasher_copy_is_independent():
    h = R30Hasher(b"x" * 40)
    c = h.copy()
    c.update(b"more")
    assert h.digest() == R30Hasher(b"x" * 40).digest()
    assert c.digest() == R30Hasher(b"x" * 40 + b"more").digest()


def test_hasher_attributes():
    h = R30Hasher()
    assert h.name == "r30"
    assert h.digest_size == 32
    assert h.block_size == 32
    assert len(h.digest()) == 32
