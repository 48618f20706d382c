from __future__ import annotations

import argparse
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class _PathGroup:
    """A required lint target; at least one candidate path must exist."""

    label: str
    candidates: tuple[str, ...]


PATH_GROUPS: tuple[_PathGroup, ...] = (
    _PathGroup("package", ("src/embedfiles",)),
    _PathGroup("ci tools", ("tools/ci",)),
    _PathGroup("tests", ("tests",)),
)


def _repo_root() -> Path:
    # tools/ci/lint_scoped.py -> tools/ci -> tools -> repo root
    return Path(__file__).resolve().parents[2]


def _resolve_scoped_paths(repo_root: Path) -> list[str]:
    resolved: list[str] = []

    for group in PATH_GROUPS:
        found = next((rel for rel in group.candidates if (repo_root / rel).exists()), None)
        if found is None:
            candidates = ", ".join(group.candidates)
            raise FileNotFoundError(
                f"Missing lint target for {group.label}. Tried: {candidates}"
            )
        resolved.append(found)

    return resolved


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python tools/ci/lint_scoped.py",
        description=(
            "Run ruff over the embedfiles sources. "
            "Exit codes: ruff's own, or 2 if a lint target is missing."
        ),
    )
    parser.add_argument("--fix", action="store_true", help="Let ruff apply safe fixes")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    repo_root = _repo_root()

    print("Scoped ruff lint (embedfiles)")

    try:
        paths = _resolve_scoped_paths(repo_root)
    except FileNotFoundError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2

    cmd = ["python", "-m", "ruff", "check"]
    if args.fix:
        cmd.append("--fix")
    cmd += paths
    print("Command:")
    print("  " + " ".join(cmd))

    completed = subprocess.run(cmd, cwd=str(repo_root), check=False)
    return int(completed.returncode)


if __name__ == "__main__":
    raise SystemExit(main())
