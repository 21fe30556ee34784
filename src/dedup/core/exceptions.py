"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/exceptions.py
Error taxonomy for the deduplication engine.

Only FatalConfigError is meant to reach the process boundary; everything else
is recovered where it is detected and reported to the operator.
"""


class DedupError(Exception):
    """Base class for all errors raised by dedup."""


class FatalConfigError(DedupError):
    """Missing or invalid configuration (e.g. base directory). Aborts before scanning."""


class CacheCorruptionError(DedupError):
    """A cache marker whose digest payload cannot be read or is malformed."""

    def __init__(self, marker_path: str, reason: str):
        self.marker_path = marker_path
        self.reason = reason
        super().__init__(f"Invalid cache entry {marker_path}: {reason}")


class MutationError(DedupError):
    """An unlink, link or rename failed while applying an operator action."""


class InputError(DedupError):
    """Operator input that does not match the command grammar."""
