from __future__ import annotations

import importlib.util
import io
import sys
from datetime import UTC, datetime
from pathlib import Path
from types import ModuleType

from embedfiles.config import EmbedConfig
from embedfiles.manifest import build_manifest
from embedfiles.render import render_module

# Fixed clock for rendered headers so output can be compared byte for byte.
FIXED_NOW = datetime(2026, 1, 25, 12, 30, 0, tzinfo=UTC)


def make_files(root: Path, files: dict[str, bytes]) -> None:
    """Create `files` (relative path -> content) under `root`."""

    for rel, data in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)


def import_module_from_path(module_name: str, path: Path) -> ModuleType:
    spec = importlib.util.spec_from_file_location(module_name, str(path))
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    return module


def render_to_text(patterns: list[str], config: EmbedConfig | None = None) -> str:
    buf = io.StringIO()
    render_module(buf, build_manifest(patterns), config or EmbedConfig(), now=FIXED_NOW)
    return buf.getvalue()


def generate_and_import(
    tmp_path: Path,
    patterns: list[str],
    config: EmbedConfig | None = None,
    module_name: str = "generated_assets",
) -> ModuleType:
    out = tmp_path / f"{module_name}.py"
    out.write_text(render_to_text(patterns, config), encoding="utf-8")
    return import_module_from_path(module_name, out)
