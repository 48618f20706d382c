from __future__ import annotations

import hashlib
import io
import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass

from embedfiles.encoding import encode_stream
from embedfiles.errors import EmbedError, NoFilesFoundError
from embedfiles.globbing import iter_matches

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FileEntry:
    name: str
    timestamp: int
    offset: int
    size: int
    sha256: str


@dataclass(frozen=True, slots=True)
class Manifest:
    """Everything the renderer needs for one generated module.

    `files` is the authoritative lookup (a name seen twice keeps its last
    entry). `filenames` lists every recorded name, sorted by raw bytes.
    `data` holds the encoded literal lines for all files back to back.
    """

    files: dict[str, FileEntry]
    filenames: list[str]
    data: str
    data_size: int
    file_count: int


def _mtime(fd: int) -> int:
    try:
        return os.fstat(fd).st_mtime_ns // 1_000_000_000
    except OSError as exc:
        logger.debug("stat failed for fd %d: %s", fd, exc)
        return 0


def _comment_text(path: str) -> str:
    # Keep control characters and undecodable bytes out of the generated comment.
    if path.isprintable():
        return path
    return repr(path)[1:-1]


def _record_name(path: str) -> str:
    return path[1:] if path.startswith("/") else path


def build_manifest(patterns: Iterable[str]) -> Manifest:
    """Expand `patterns` in order and encode every matched file.

    Raises BadPatternError for malformed patterns, EmbedError for I/O
    failures and NoFilesFoundError when nothing matched at all.
    """

    offset = 0
    file_count = 0
    filenames: list[str] = []
    files: dict[str, FileEntry] = {}
    databuf = io.StringIO()

    for pattern in patterns:
        for path in iter_matches(pattern):
            file_count += 1
            databuf.write(f"\n    # {_comment_text(path)}\n")
            try:
                f = open(path, "rb")
            except OSError as exc:
                raise EmbedError(f"Failed to read {path}: {exc}") from exc

            name = _record_name(path)
            filenames.append(name)
            digest = hashlib.sha256()
            with f:
                ts = _mtime(f.fileno())
                try:
                    size, _ = encode_stream(databuf, f, digest=digest)
                except OSError as exc:
                    raise EmbedError(f"Failed to process {name}: {exc}") from exc

            if name in files:
                logger.warning("%s embedded more than once; keeping the last copy", name)
            files[name] = FileEntry(
                name=name,
                timestamp=ts,
                offset=offset,
                size=size,
                sha256=digest.hexdigest(),
            )
            logger.debug("embedded %s at offset %d (%d bytes)", name, offset, size)
            offset += size

    if file_count == 0:
        raise NoFilesFoundError("No files found")

    filenames.sort(key=os.fsencode)
    logger.info("embedded %d file(s), %d bytes", file_count, offset)
    return Manifest(
        files=files,
        filenames=filenames,
        data=databuf.getvalue(),
        data_size=offset,
        file_count=file_count,
    )


__all__ = [
    "FileEntry",
    "Manifest",
    "build_manifest",
]
