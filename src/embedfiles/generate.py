from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime
from typing import TextIO

from embedfiles.config import EmbedConfig
from embedfiles.errors import UsageError
from embedfiles.manifest import Manifest, build_manifest
from embedfiles.render import render_module
from embedfiles.sidecar import write_manifest_json

logger = logging.getLogger(__name__)


def generate(
    out: TextIO,
    config: EmbedConfig,
    patterns: Sequence[str],
    *,
    now: datetime | None = None,
) -> Manifest:
    """Embed every file matched by `patterns` and write the module to `out`.

    Nothing is written to `out` unless the whole manifest was built.
    """

    if not patterns:
        raise UsageError("No globs specified")

    manifest = build_manifest(patterns)
    render_module(out, manifest, config, now=now)

    if config.manifest_json:
        path = write_manifest_json(config.manifest_json, manifest, config)
        logger.info("wrote manifest sidecar %s", path)
    return manifest


__all__ = ["generate"]
