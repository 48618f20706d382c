from __future__ import annotations

import argparse
import hashlib
import importlib.util
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Any

from embedfiles.sidecar import read_manifest_json


@dataclass(frozen=True, slots=True)
class VerificationResult:
    ok: bool
    errors: list[str]
    warnings: list[str]


def _load_module(path: Path) -> ModuleType:
    spec = importlib.util.spec_from_file_location(f"_embedded_{path.stem}", str(path))
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load module from {path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def verify_module(module_path: str | Path, manifest_json: str | Path) -> VerificationResult:
    """Check a generated module's embedded files against its manifest sidecar."""

    errors: list[str] = []
    warnings: list[str] = []

    module_file = Path(module_path)
    if not module_file.is_file():
        return VerificationResult(False, [f"Module does not exist: {module_file}"], [])

    try:
        payload: dict[str, Any] = read_manifest_json(manifest_json)
    except (OSError, ValueError) as exc:
        return VerificationResult(
            False, [f"Failed to read manifest: {exc.__class__.__name__}: {exc}"], []
        )

    try:
        module = _load_module(module_file)
    except Exception as exc:
        return VerificationResult(
            False, [f"Failed to import module: {exc.__class__.__name__}: {exc}"], []
        )

    var = str(payload.get("var", ""))
    fs = getattr(module, var, None)
    if fs is None:
        return VerificationResult(False, [f"Module has no embedded filesystem named {var!r}"], [])

    if fs.filenames() != payload.get("filenames"):
        errors.append("Filename list differs from manifest")

    for entry in payload.get("files", []):
        name = entry["name"]
        try:
            with fs.open(name) as f:
                data = f.read()
                size = f.stat().size()
        except FileNotFoundError:
            errors.append(f"Missing embedded file listed in manifest: {name}")
            continue

        if size != entry["size"] or len(data) != entry["size"]:
            errors.append(f"Size mismatch for {name}: expected={entry['size']} actual={len(data)}")
            continue

        actual = hashlib.sha256(data).hexdigest()
        if actual != entry["sha256"]:
            errors.append(
                f"SHA256 mismatch for {name}: expected={entry['sha256']} actual={actual}"
            )

    if payload.get("file_count", 0) != len(payload.get("files", [])):
        warnings.append("Some files were embedded more than once; only the last copy is reachable")

    return VerificationResult(ok=not errors, errors=errors, warnings=warnings)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python scripts/verify_embedded_module.py",
        description="Verify a module generated by embedfiles against its -manifest-json sidecar.",
    )
    parser.add_argument("module", type=str, help="Path to the generated .py module")
    parser.add_argument("manifest_json", type=str, help="Path to the manifest sidecar JSON")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    result = verify_module(args.module, args.manifest_json)

    for w in result.warnings:
        print(f"WARN: {w}")

    if result.ok:
        print("PASS: embedded module matches its manifest")
        return 0

    print("FAIL: embedded module does not match its manifest")
    for e in result.errors:
        print(f"- {e}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
