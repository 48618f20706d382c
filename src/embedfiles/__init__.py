"""Embed files on disk into a self-contained Python module.

The generated module exposes a small read-only virtual filesystem over the
embedded bytes, so programs can ship static assets without separate files.
"""

__all__: list[str] = [
    "cli",
    "config",
    "encoding",
    "errors",
    "generate",
    "globbing",
    "manifest",
    "render",
    "sidecar",
]
