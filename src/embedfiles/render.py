"""Emit the generated Python module around a built manifest.

The output is composed from small emission routines. `include_http` selects
the extra imports, the widened `open()` annotation and the WSGI entry point;
everything else is shared by both variants.
"""

from __future__ import annotations

import os
from datetime import UTC, datetime
from typing import TextIO

from embedfiles.config import EmbedConfig
from embedfiles.manifest import Manifest

TIME_FORMAT = "%a %b %d %H:%M:%S UTC %Y"

FILE_MODE = 0o444


def _header(config: EmbedConfig, now: datetime) -> str:
    lines = [
        f'"""Embedded files for module {config.package}.',
        "",
        "Generated by embedfiles; do not edit.",
        f"at {now.astimezone(UTC).strftime(TIME_FORMAT)}",
        '"""',
        "",
        "from __future__ import annotations",
        "",
        "import errno",
        "import io",
        "import os",
        "import posixpath",
        "from datetime import datetime, timezone",
    ]
    if config.include_http:
        lines += [
            "import mimetypes",
            "from email.utils import formatdate",
            "from typing import BinaryIO",
            "from wsgiref.util import FileWrapper",
        ]
    if config.exported:
        lines += ["", f"__all__ = [{config.var!r}]"]
    return "\n".join(lines) + "\n\n\n"


def _file_types(p: str) -> str:
    return f'''class {p}FileInfo:
    __slots__ = ("_name", "_size", "_mode", "_mtime")

    def __init__(self, name: str, size: int, mode: int, mtime: datetime) -> None:
        self._name = name
        self._size = size
        self._mode = mode
        self._mtime = mtime

    def name(self) -> str:
        return self._name

    def size(self) -> int:
        return self._size

    def mode(self) -> int:
        return self._mode

    def mod_time(self) -> datetime:
        return self._mtime

    def is_dir(self) -> bool:
        return False


class {p}File(io.BytesIO):
    def __init__(self, data: bytes, info: {p}FileInfo) -> None:
        super().__init__(data)
        self._info = info

    def stat(self) -> {p}FileInfo:
        return self._info

    def readdir(self, count: int = -1) -> list[{p}FileInfo]:
        raise PermissionError("Denied")


'''


def _fs_type(p: str, include_http: bool) -> str:
    open_type = "BinaryIO" if include_http else f"{p}File"
    return f'''class {p}FS:
    def __init__(
        self,
        filenames: list[str],
        files: dict[str, tuple[int, int, int]],
        data: bytes,
        data_size: int,
    ) -> None:
        if len(data) != data_size:
            raise ValueError(f"embedded data is {{len(data)}} bytes, expected {{data_size}}")
        self._filenames = filenames
        self._files = files
        self._data = data

    def filenames(self) -> list[str]:
        return list(self._filenames)

    def open(self, filename: str) -> {open_type}:
        """Return a readable in-memory file for `filename`."""
        if filename.startswith("/"):
            filename = filename[1:]
        entry = self._files.get(filename)
        if entry is None:
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), filename)
        ts, offset, size = entry
        info = {p}FileInfo(
            posixpath.basename(filename),
            size,
            {FILE_MODE:#o},
            datetime.fromtimestamp(ts, timezone.utc),
        )
        return {p}File(self._data[offset : offset + size], info)
'''


def _wsgi_method() -> str:
    return '''
    def __call__(self, environ, start_response):
        """Serve the embedded files as a WSGI application (GET and HEAD only)."""
        method = environ.get("REQUEST_METHOD", "GET")
        if method not in ("GET", "HEAD"):
            start_response(
                "405 Method Not Allowed",
                [("Allow", "GET, HEAD"), ("Content-Type", "text/plain; charset=utf-8")],
            )
            return [b"405 method not allowed\\n"]
        path = environ.get("PATH_INFO", "").encode("latin-1").decode("utf-8", "surrogateescape")
        try:
            f = self.open(path)
        except FileNotFoundError:
            start_response("404 Not Found", [("Content-Type", "text/plain; charset=utf-8")])
            return [b"404 page not found\\n"]
        info = f.stat()
        ctype = mimetypes.guess_type(info.name())[0] or "application/octet-stream"
        start_response(
            "200 OK",
            [
                ("Content-Type", ctype),
                ("Content-Length", str(info.size())),
                ("Last-Modified", formatdate(info.mod_time().timestamp(), usegmt=True)),
            ],
        )
        if method == "HEAD":
            f.close()
            return [b""]
        wrapper = environ.get("wsgi.file_wrapper", FileWrapper)
        return wrapper(f)
'''


def _instance(p: str, var: str, manifest: Manifest) -> str:
    lines = [
        "",
        "",
        f"{var} = {p}FS(",
        "    filenames=[",
    ]
    lines += [f"        {name!r}," for name in manifest.filenames]
    lines += ["    ],", "    files={"]
    for name in sorted(manifest.files, key=os.fsencode):
        e = manifest.files[name]
        lines.append(f"        {name!r}: ({e.timestamp}, {e.offset}, {e.size}),")
    lines += [
        "    },",
        f"    data_size={manifest.data_size},",
        "    data=bytes([",
    ]
    return "\n".join(lines) + manifest.data + "    ]),\n)\n"


def render_module(
    out: TextIO,
    manifest: Manifest,
    config: EmbedConfig,
    *,
    now: datetime | None = None,
) -> None:
    """Write the complete generated module for `manifest` to `out`."""

    if now is None:
        now = datetime.now(UTC)
    p = config.class_prefix
    out.write(_header(config, now))
    out.write(_file_types(p))
    out.write(_fs_type(p, config.include_http))
    if config.include_http:
        out.write(_wsgi_method())
    out.write(_instance(p, config.var, manifest))


__all__ = [
    "FILE_MODE",
    "TIME_FORMAT",
    "render_module",
]
