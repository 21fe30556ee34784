"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the deduplication system.
These protocols enforce structural typing using Python's `typing.Protocol` so
implementations can be swapped in tests without inheritance.

Key Components:
---------------
- DigestState: incremental digest object (update / hexdigest), as returned by hashlib and xxhash.
- HashAlgorithm: factory for digest states plus the hex length of its digests.
- Hasher: computes the digest of a whole file.
- LineReader: interactive line-input provider (prompt + read one line).
"""

from typing import Protocol


class DigestState(Protocol):
    def update(self, data: bytes) -> None: ...
    def hexdigest(self) -> str: ...


class HashAlgorithm(Protocol):
    """
    Interface for generic hash algorithms.

    Allows plugging in different hashing functions like MD5 or xxHash
    without affecting the rest of the deduplication logic.
    """
    name: str
    hex_length: int

    def new(self) -> DigestState:
        """Returns a fresh incremental digest state."""
        ...


class Hasher(Protocol):
    """Interface for hashing file content."""
    def hash(self, path: str) -> str: ...


class LineReader(Protocol):
    """
    Interface for reading operator input.

    Implementations raise EOFError when input is exhausted.
    """
    def readline(self, prompt: str) -> str: ...
