from __future__ import annotations


class EmbedError(RuntimeError):
    """Fatal generation error; the CLI reports it and exits with code 100."""


class UsageError(EmbedError):
    pass


class BadPatternError(EmbedError, ValueError):
    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"syntax error in pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


class NoFilesFoundError(EmbedError):
    pass


__all__ = [
    "BadPatternError",
    "EmbedError",
    "NoFilesFoundError",
    "UsageError",
]
