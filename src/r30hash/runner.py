"""
R30 Digest Runner

Command-line front end and receipts builder.

  - No arguments: hash the demo text "hello, world"
  - --text TEXT [--encoding ENC]: hash a literal string
  - FILE ... ('-' for stdin): hash each file, sha256sum-style lines
  - --receipts: print the JSON receipts bundle instead
  - --determinism-check: build receipts twice, require identical hashes

Exit codes: 0 success, 1 read failure / bad encoding / missing file.
"""

import io
import logging
import sys
from typing import BinaryIO, Callable, List, Tuple

from .core import Receipts, DeterminismError, assert_double_run_equal, hex_string
from .digest import default_encoding, digest_stream
from .stream import SourceReadError, block_count, padding_path

logger = logging.getLogger(__name__)

DEMO_TEXT = "hello, world"

# (label, opener) pairs; each opener returns a fresh binary stream
Source = Tuple[str, Callable[[], BinaryIO]]


class _CountingReader:
    """Binary read() proxy that counts bytes handed out."""

    def __init__(self, source: BinaryIO):
        self._source = source
        self.count = 0

    def read(self, n: int = -1):
        chunk = self._source.read(n)
        if chunk:
            self.count += len(chunk)
        return chunk


def text_source(text: str, encoding: str | None = None) -> Source:
    data = text.encode(encoding or default_encoding())
    return (text, lambda: io.BytesIO(data))


def file_source(path: str) -> Source:
    return (path, lambda: open(path, 'rb'))


class _BorrowedStream:
    """Context manager over a stream the runner must not close."""

    def __init__(self, source: BinaryIO):
        self._source = source

    def __enter__(self):
        return self._source

    def __exit__(self, *exc):
        return False


def stdin_source(replayable: bool = False) -> Source:
    """
    Source over sys.stdin.buffer.

    Streams stdin block by block unless replayable is set, in which case
    stdin is read once on first open and served from memory afterwards.
    """
    if not replayable:
        return ("-", lambda: _BorrowedStream(sys.stdin.buffer))

    cache = []

    def opener():
        if not cache:
            try:
                cache.append(sys.stdin.buffer.read())
            except (OSError, ValueError) as exc:
                raise SourceReadError(f"Failed to read stdin: {exc}") from exc
        return io.BytesIO(cache[0])

    return ("-", opener)


def digest_entry(label: str, opener: Callable[[], BinaryIO]) -> dict:
    """
    Digest one source and describe how it was blocked.

    Returns:
        dict: label, length, blocks, padding_path, digest (hex).

    Raises:
        OSError: If the source cannot be opened; SourceReadError on read faults.
    """
    with opener() as source:
        reader = _CountingReader(source)
        value = digest_stream(reader)

    length = reader.count
    logger.debug("Digested %r: %d bytes", label, length)
    return {
        "label": label,
        "length": length,
        "blocks": block_count(length),
        "padding_path": padding_path(length),
        "digest": hex_string(value),
    }


def digest_receipts(sources: List[Source], section: str = "r30-digest") -> Receipts:
    """Build a receipts section covering every source in order."""
    receipts = Receipts(section)
    receipts.put("source_count", len(sources))
    receipts.put("entries", [digest_entry(label, opener) for label, opener in sources])
    return receipts


def digest_receipts_checked(sources: List[Source], section: str = "r30-digest") -> dict:
    """
    Build receipts twice and verify the section hashes match.

    Raises:
        DeterminismError: If the two runs disagree.
    """
    result = assert_double_run_equal(lambda: digest_receipts(sources, section))
    return {**result, "determinism.double_run_ok": True}


def _format_line(entry: dict, is_text: bool) -> str:
    if is_text:
        return f"The R30 hash value for \"{entry['label']}\" is: {entry['digest']}"
    return f"{entry['digest']}  {entry['label']}"


def main(argv=None) -> int:
    import argparse
    import json

    parser = argparse.ArgumentParser(
        prog="r30hash",
        description="R30 (Rule 30 cellular automaton) 256-bit digest",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Demo digest of "hello, world"
  python -m r30hash.runner

  # Hash a string with an explicit encoding
  python -m r30hash.runner --text "grüße" --encoding utf-8

  # Hash files (use - for stdin)
  python -m r30hash.runner README.md - < data.bin

  # Receipts with double-run determinism check
  python -m r30hash.runner --receipts --determinism-check file.bin
        """
    )

    parser.add_argument(
        "files",
        nargs="*",
        help="Files to hash ('-' reads stdin). Default: the demo text."
    )

    parser.add_argument(
        "--text",
        type=str,
        default=None,
        help="Hash this literal string instead of files."
    )

    parser.add_argument(
        "--encoding",
        type=str,
        default=None,
        help="Text encoding for --text. Default: platform encoding."
    )

    parser.add_argument(
        "--receipts",
        action="store_true",
        help="Print JSON receipts instead of digest lines. Default: False."
    )

    parser.add_argument(
        "--determinism-check",
        action="store_true",
        help="Build receipts twice and compare section hashes. Default: False."
    )

    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Write output to this file. Default: print to stdout."
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging on stderr."
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s"
        )

    if args.text is not None and args.files:
        print("Error: --text cannot be combined with files", file=sys.stderr)
        return 1

    if args.encoding is not None and args.files:
        print("Error: --encoding only applies to --text", file=sys.stderr)
        return 1

    # Build sources
    is_text = not args.files
    try:
        if args.files:
            sources = []
            for path in args.files:
                if path == "-":
                    sources.append(stdin_source(replayable=args.determinism_check))
                else:
                    sources.append(file_source(path))
        else:
            text = DEMO_TEXT if args.text is None else args.text
            sources = [text_source(text, args.encoding)]
    except LookupError as e:
        print(f"Error: Unknown encoding: {e}", file=sys.stderr)
        return 1
    except UnicodeEncodeError as e:
        print(f"Error: Cannot encode text: {e}", file=sys.stderr)
        return 1

    # Digest
    try:
        if args.determinism_check:
            result = digest_receipts_checked(sources)
        else:
            result = digest_receipts(sources).digest()
    except OSError as e:
        # SourceReadError and open() failures
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except DeterminismError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.receipts:
        output = json.dumps(result, indent=2)
    else:
        output = "\n".join(
            _format_line(entry, is_text) for entry in result["payload"]["entries"]
        )

    if args.output:
        with open(args.output, 'w') as f:
            f.write(output + "\n")
        print(f"Results written to: {args.output}")
    else:
        print(output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
