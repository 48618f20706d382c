"""Render raw bytes as Python byte-literal tokens.

Each chunk read from the source becomes one line of the form::

        0x89, 0x50, 0x4e, 0x47,

suitable for the body of a `bytes([...])` initializer.
"""

from __future__ import annotations

import re
from typing import BinaryIO, Protocol, TextIO

CHUNK_SIZE = 16
INDENT = "   "

_TOKENS = tuple(f" 0x{b:02x}," for b in range(256))
_TOKEN_RE = re.compile(r"\b0x([0-9a-fA-F]{2})\b")


class _Digest(Protocol):
    def update(self, data: bytes, /) -> None: ...


def format_chunk(chunk: bytes) -> str:
    return INDENT + "".join(_TOKENS[b] for b in chunk) + "\n"


def encode_stream(
    out: TextIO,
    stream: BinaryIO,
    *,
    chunk_size: int = CHUNK_SIZE,
    digest: _Digest | None = None,
) -> tuple[int, int]:
    """Copy `stream` to `out` as literal tokens, one line per chunk read.

    Returns (bytes_read, chars_written). Errors from either side propagate;
    only end of stream terminates normally.
    """

    if chunk_size < 1:
        raise ValueError("chunk_size must be >= 1")

    bytes_read = 0
    chars_written = 0
    for chunk in iter(lambda: stream.read(chunk_size), b""):
        line = format_chunk(chunk)
        written = out.write(line)
        chars_written += len(line) if written is None else written
        bytes_read += len(chunk)
        if digest is not None:
            digest.update(chunk)
    return bytes_read, chars_written


def decode_literal(text: str) -> bytes:
    """Parse `0xNN` tokens back into bytes. Comment lines are ignored."""

    out = bytearray()
    for line in text.splitlines():
        code = line.split("#", 1)[0]
        out.extend(int(m.group(1), 16) for m in _TOKEN_RE.finditer(code))
    return bytes(out)


__all__ = [
    "CHUNK_SIZE",
    "decode_literal",
    "encode_stream",
    "format_chunk",
]
