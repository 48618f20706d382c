from __future__ import annotations

import hashlib
import json
from pathlib import Path

import pytest

from embedfiles.config import EmbedConfig
from embedfiles.manifest import build_manifest
from embedfiles.sidecar import (
    SCHEMA_VERSION,
    manifest_payload,
    read_manifest_json,
    write_manifest_json,
    write_payload,
)
from tests.fixtures import make_files


def _schema() -> dict:
    repo_root = Path(__file__).resolve().parents[1]
    schema_path = repo_root / "schemas" / "embedfiles_manifest.schema.json"
    return json.loads(schema_path.read_text(encoding="utf-8"))


def test_sidecar_validates_against_schema(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    make_files(tmp_path, {"a.txt": b"\x01\x02\x03", "b.txt": b"", "d/c.bin": b"ccc"})

    out = write_manifest_json(
        tmp_path / "out" / "manifest.json",
        build_manifest(["a.txt", "b.txt", "d/*"]),
        EmbedConfig(var="Assets", include_http=True),
    )
    instance = json.loads(out.read_text(encoding="utf-8"))

    # Keep dependency lightweight: jsonschema is a dev/test-only dependency.
    import jsonschema

    jsonschema.validate(instance=instance, schema=_schema())
    assert instance["schema_version"] == SCHEMA_VERSION
    assert instance["var"] == "Assets"
    assert instance["include_http"] is True


def test_sidecar_is_byte_for_byte_deterministic(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    make_files(tmp_path, {"z.txt": b"zz", "a.txt": b"a"})

    first = write_manifest_json(tmp_path / "one.json", build_manifest(["*.txt"]), EmbedConfig())
    second = write_manifest_json(tmp_path / "two.json", build_manifest(["*.txt"]), EmbedConfig())

    raw = first.read_bytes()
    assert raw == second.read_bytes()
    assert raw.endswith(b"}\n")
    assert b"\r\n" not in raw


def test_payload_lists_files_by_name_with_hashes(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    make_files(tmp_path, {"b.txt": b"bb", "a.txt": b"a"})

    payload = manifest_payload(build_manifest(["b.txt", "a.txt"]), EmbedConfig())

    assert [f["name"] for f in payload["files"]] == ["a.txt", "b.txt"]
    assert payload["files"][0] == {
        "name": "a.txt",
        "timestamp": payload["files"][0]["timestamp"],
        "offset": 2,
        "size": 1,
        "sha256": hashlib.sha256(b"a").hexdigest(),
    }
    assert payload["data_size"] == 3
    assert payload["file_count"] == 2


def test_read_manifest_json_round_trips_and_rejects_non_objects(
    tmp_path: Path, monkeypatch
) -> None:
    monkeypatch.chdir(tmp_path)
    make_files(tmp_path, {"a.txt": b"a"})
    manifest = build_manifest(["a.txt"])

    out = write_manifest_json(tmp_path / "nested" / "m.json", manifest, EmbedConfig())
    assert read_manifest_json(out) == manifest_payload(manifest, EmbedConfig())

    bad = write_payload(tmp_path / "bad.json", {})
    bad.write_text("[1, 2]\n", encoding="utf-8")
    with pytest.raises(ValueError, match="must be a JSON object"):
        read_manifest_json(bad)
