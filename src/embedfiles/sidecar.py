"""Deterministic JSON description of a generated module's manifest.

The sidecar carries no generation timestamp, so identical inputs always
produce identical bytes (UTF-8, LF newlines, sorted keys, trailing newline).
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from embedfiles.config import EmbedConfig
from embedfiles.manifest import Manifest

SCHEMA_VERSION = "1.0.0"


def read_manifest_json(path: str | Path) -> dict[str, Any]:
    """Load a sidecar written by `write_manifest_json`."""

    data = json.loads(Path(path).read_text(encoding="utf-8", errors="surrogateescape"))
    if not isinstance(data, dict):
        raise ValueError("manifest sidecar must be a JSON object")
    return data


def write_payload(path: str | Path, payload: dict[str, Any]) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    # Names that came from undecodable filenames are written back as raw bytes.
    out.write_text(
        json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False) + "\n",
        encoding="utf-8",
        errors="surrogateescape",
        newline="\n",
    )
    return out


def manifest_payload(manifest: Manifest, config: EmbedConfig) -> dict[str, Any]:
    files = [manifest.files[name] for name in sorted(manifest.files, key=os.fsencode)]
    return {
        "schema_version": SCHEMA_VERSION,
        "package": config.package,
        "var": config.var,
        "include_http": config.include_http,
        "file_count": manifest.file_count,
        "data_size": manifest.data_size,
        "filenames": list(manifest.filenames),
        "files": [
            {
                "name": e.name,
                "timestamp": e.timestamp,
                "offset": e.offset,
                "size": e.size,
                "sha256": e.sha256,
            }
            for e in files
        ],
    }


def write_manifest_json(path: str | Path, manifest: Manifest, config: EmbedConfig) -> Path:
    return write_payload(path, manifest_payload(manifest, config))


__all__ = [
    "SCHEMA_VERSION",
    "manifest_payload",
    "read_manifest_json",
    "write_manifest_json",
    "write_payload",
]
