"""
Core Component: Digest Receipts & Double-Run Checker

A receipt records how each source was digested: byte length, padded
block count, padding path and the R30 digest. Receipts are bound to the
parameter registry through param_registry_hash and sealed with a
section_hash, so two runs over the same input must seal identically.

Values are plain JSON: None, bool, int, str, list, dict.
"""

import json
import string
from typing import Any, Callable

from .registry import HASH_BYTES, param_registry
from .hashing import blake3_hash

# Fields holding an R30 digest, rendered as lowercase hex
DIGEST_FIELDS = frozenset({"digest"})

# Fields holding byte or block counts
COUNT_FIELDS = frozenset({"length", "blocks", "source_count"})

_HEX_DIGITS = frozenset(string.hexdigits.lower())


class Receipts:
    """
    Section-scoped receipt builder.

    One Receipts per run; put() fields in order, then digest() returns
    section, algorithm, param_registry_hash, payload and section_hash.
    Digest and count fields are checked on the way in, at any depth.
    """

    def __init__(self, section: str):
        self.section = section
        self.payload = []  # (key, value), insertion order

    def put(self, key: str, value: Any) -> None:
        """
        Raises:
            ReceiptError: Duplicate key, non-JSON value, malformed digest
                or negative count.
        """
        if any(k == key for k, _ in self.payload):
            raise ReceiptError(f"Duplicate key in receipts: '{key}'")

        _check_value(value, key, key)
        self.payload.append((key, value))

    def digest(self) -> dict:
        registry = param_registry()

        pre_digest = {
            "section": self.section,
            "algorithm": registry["algorithm"],
            "param_registry_hash": blake3_hash(_stable_json_bytes(registry)),
            "payload": dict(self.payload),
        }
        return {
            **pre_digest,
            "section_hash": blake3_hash(_stable_json_bytes(pre_digest)),
        }


def assert_double_run_equal(build_section_callable: Callable[[], Receipts]) -> dict:
    """
    Build the section twice and require identical section hashes.

    On mismatch the error names the first differing field by path, e.g.
    'entries[1].digest', so a drifting source is identified directly.

    Returns:
        dict: The digest of the first run.

    Raises:
        DeterminismError: If section_hash differs between runs.
    """
    digest_a = build_section_callable().digest()
    digest_b = build_section_callable().digest()

    hash_a = digest_a["section_hash"]
    hash_b = digest_b["section_hash"]
    if hash_a == hash_b:
        return digest_a

    path, val_a, val_b = _first_difference(digest_a["payload"], digest_b["payload"], "")
    raise DeterminismError(
        section=digest_a["section"],
        first_differing_key=path,
        value_a=val_a,
        value_b=val_b,
        hash_a=hash_a,
        hash_b=hash_b
    )


_MISSING = "<MISSING>"


def _first_difference(a: Any, b: Any, path: str):
    """Return (path, a_value, b_value) of the first leaf where a and b differ."""
    if isinstance(a, dict) and isinstance(b, dict):
        for key in sorted(set(a) | set(b)):
            sub = f"{path}.{key}" if path else key
            if key not in a or key not in b:
                return sub, a.get(key, _MISSING), b.get(key, _MISSING)
            if a[key] != b[key]:
                return _first_difference(a[key], b[key], sub)
    elif isinstance(a, list) and isinstance(b, list):
        for i in range(max(len(a), len(b))):
            sub = f"{path}[{i}]"
            if i >= len(a) or i >= len(b):
                return (sub,
                        a[i] if i < len(a) else _MISSING,
                        b[i] if i < len(b) else _MISSING)
            if a[i] != b[i]:
                return _first_difference(a[i], b[i], sub)
    return path or None, a, b


def _stable_json_bytes(obj: Any) -> bytes:
    """Compact, key-sorted UTF-8 JSON."""
    return json.dumps(
        obj,
        sort_keys=True,
        ensure_ascii=False,
        separators=(',', ':')
    ).encode('utf-8')


def _check_value(value: Any, field: str, path: str) -> None:
    # field is the innermost dict key, path the full location for messages
    if field in DIGEST_FIELDS:
        if not _is_hex_digest(value):
            raise ReceiptError(
                f"'{path}' must be a {HASH_BYTES * 2}-char lowercase hex digest, got {value!r}"
            )
        return

    if field in COUNT_FIELDS:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ReceiptError(f"'{path}' must be a non-negative int, got {value!r}")
        return

    if value is None or isinstance(value, (bool, int, str)):
        return

    if isinstance(value, float):
        raise ReceiptError(f"Floats forbidden in receipts ('{path}')")

    if isinstance(value, list):
        for i, item in enumerate(value):
            _check_value(item, field, f"{path}[{i}]")
        return

    if isinstance(value, dict):
        for k, v in value.items():
            if not isinstance(k, str):
                raise ReceiptError(f"Non-string key {k!r} in receipts ('{path}')")
            _check_value(v, k, f"{path}.{k}")
        return

    raise ReceiptError(
        f"Invalid type in receipts: {type(value).__name__} ('{path}'). "
        f"Allowed: None, bool, int, str, list, dict."
    )


def _is_hex_digest(value: Any) -> bool:
    return (
        isinstance(value, str)
        and len(value) == HASH_BYTES * 2
        and set(value) <= _HEX_DIGITS
    )


class ReceiptError(Exception):
    """Invalid receipt field."""


class DeterminismError(Exception):
    """Raised when double-run produces different section hashes."""

    def __init__(
        self,
        section: str,
        first_differing_key: str | None,
        value_a: Any,
        value_b: Any,
        hash_a: str,
        hash_b: str
    ):
        self.section = section
        self.first_differing_key = first_differing_key
        self.value_a = value_a
        self.value_b = value_b
        self.hash_a = hash_a
        self.hash_b = hash_b

        msg = (
            f"Double-run hash mismatch in section '{section}'.\n"
            f"  First differing field: '{first_differing_key}'\n"
            f"  Value A: {value_a}\n"
            f"  Value B: {value_b}\n"
            f"  Hash A: {hash_a}\n"
            f"  Hash B: {hash_b}"
        )
        super().__init__(msg)
