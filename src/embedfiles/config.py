from __future__ import annotations

import builtins
import keyword
from dataclasses import dataclass

from embedfiles.errors import UsageError

DEFAULT_FILENAME = "-"
DEFAULT_PACKAGE = "main"
DEFAULT_VAR = "assets"

# Module-level names the generated code imports; builtins are checked separately.
RESERVED_NAMES: frozenset[str] = frozenset(
    {
        "BinaryIO",
        "FileWrapper",
        "annotations",
        "datetime",
        "errno",
        "formatdate",
        "io",
        "mimetypes",
        "os",
        "posixpath",
        "timezone",
    }
)


def _is_identifier(name: str) -> bool:
    return name.isidentifier() and not keyword.iskeyword(name)


@dataclass(frozen=True, slots=True)
class EmbedConfig:
    """Options for one generation run, built once from the command line.

    `filename` of "-" or "" writes to standard output. `var` names the
    generated filesystem instance; a leading underscore keeps it out of the
    generated module's `__all__`.
    """

    filename: str = DEFAULT_FILENAME
    package: str = DEFAULT_PACKAGE
    var: str = DEFAULT_VAR
    include_http: bool = False
    manifest_json: str | None = None

    def __post_init__(self) -> None:
        if not _is_identifier(self.var):
            raise UsageError(f"Invalid variable name: {self.var!r}")
        if self.var.startswith("__") and self.var.endswith("__"):
            raise UsageError(f"Variable name {self.var!r} is reserved for module attributes")
        if self.var in RESERVED_NAMES or hasattr(builtins, self.var):
            raise UsageError(
                f"Variable name {self.var!r} clashes with a name used by the generated module"
            )
        parts = self.package.split(".")
        if not all(_is_identifier(p) for p in parts):
            raise UsageError(f"Invalid package name: {self.package!r}")

    @property
    def writes_stdout(self) -> bool:
        return self.filename in ("", "-")

    @property
    def exported(self) -> bool:
        return not self.var.startswith("_")

    @property
    def class_prefix(self) -> str:
        """Class name prefix derived from `var`: "assets" -> "Assets"."""

        stripped = self.var.lstrip("_")
        leading = self.var[: len(self.var) - len(stripped)]
        return leading + stripped[:1].upper() + stripped[1:]


__all__ = [
    "DEFAULT_FILENAME",
    "DEFAULT_PACKAGE",
    "DEFAULT_VAR",
    "EmbedConfig",
    "RESERVED_NAMES",
]
