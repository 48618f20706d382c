#!/usr/bin/env python3
"""Command-line entry point: embed files into a generated Python module.

Example, embedding HTML and CSS into `webserver/assets.py`::

    embedfiles -filename webserver/assets.py -package webserver -include-http \\
        -var Assets 'assets/*.html' 'assets/*.css'

The generated module can then be used as::

    from webserver.assets import Assets

    with Assets.open("assets/index.html") as f:
        html = f.read()

or, when generated with `-include-http`, served directly as a WSGI app::

    wsgiref.simple_server.make_server("", 8080, Assets).serve_forever()
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TextIO

from embedfiles.config import DEFAULT_FILENAME, DEFAULT_PACKAGE, DEFAULT_VAR, EmbedConfig
from embedfiles.errors import EmbedError, UsageError
from embedfiles.generate import generate

EXIT_FAILURE = 100

logger = logging.getLogger("embedfiles")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="embedfiles",
        description=(
            "Read one or more files and embed them into a .py source file for shipping "
            "inside a program. Exit codes: 0=success, 100=error."
        ),
    )
    parser.add_argument(
        "-filename",
        "--filename",
        "-o",
        dest="filename",
        default=DEFAULT_FILENAME,
        help="File to write Python output to. Defaults to stdout (default: %(default)s)",
    )
    parser.add_argument(
        "-package",
        "--package",
        dest="package",
        default=DEFAULT_PACKAGE,
        help="Module name recorded in the generated file (default: %(default)s)",
    )
    parser.add_argument(
        "-var",
        "--var",
        dest="var",
        default=DEFAULT_VAR,
        help=(
            "Variable name to assign the assets to. Start with an underscore to keep it "
            "out of the module's __all__ (default: %(default)s)"
        ),
    )
    parser.add_argument(
        "-include-http",
        "--include-http",
        dest="include_http",
        action="store_true",
        help="Make the generated filesystem a WSGI application serving the embedded files",
    )
    parser.add_argument(
        "-manifest-json",
        "--manifest-json",
        dest="manifest_json",
        default=None,
        help="Optional path to also write a JSON description of the embedded files",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (repeat for debug output)",
    )
    parser.add_argument("patterns", nargs="*", metavar="GLOB", help="File glob to embed")
    return parser


def _setup_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logger.setLevel(level)

    # Rebind to the current stderr on every run.
    for old in list(logger.handlers):
        logger.removeHandler(old)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter("%(asctime)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S")
    )
    logger.addHandler(handler)
    logger.propagate = False


@contextmanager
def _open_output(config: EmbedConfig) -> Iterator[TextIO]:
    if config.writes_stdout:
        yield sys.stdout
        return

    try:
        f = open(config.filename, "w", encoding="utf-8", errors="surrogateescape", newline="\n")
    except OSError as exc:
        raise EmbedError(f"Failed to open file for write: {exc}") from exc
    with f:
        yield f


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    _setup_logging(args.verbose)

    try:
        if not args.patterns:
            raise UsageError("No globs specified")
        config = EmbedConfig(
            filename=args.filename,
            package=args.package,
            var=args.var,
            include_http=args.include_http,
            manifest_json=args.manifest_json,
        )
        with _open_output(config) as out:
            generate(out, config, args.patterns)
    except (EmbedError, OSError) as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_FAILURE

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
