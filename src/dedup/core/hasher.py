"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements whole-file content hashing with pluggable hash algorithms.

ContentHasher streams files in fixed-size chunks so memory use does not grow
with file size. Read errors are not swallowed: callers decide whether to skip.
"""

import hashlib
import logging

import xxhash

from dedup.core.interfaces import Hasher, HashAlgorithm, DigestState
from dedup.core.models import HashAlgorithmName, HASH_CHUNK_SIZE

logger = logging.getLogger(__name__)

_HEX_DIGITS = frozenset("0123456789abcdef")


class MD5AlgorithmImpl(HashAlgorithm):
    name = "md5"
    hex_length = 32

    def new(self) -> DigestState:
        return hashlib.md5()


# Use the same way to implement and use any other hashing algorithm
class XXHashAlgorithmImpl(HashAlgorithm):
    name = "xxhash"
    hex_length = 16

    def new(self) -> DigestState:
        return xxhash.xxh64()


ALGORITHMS = {
    HashAlgorithmName.MD5: MD5AlgorithmImpl,
    HashAlgorithmName.XXHASH: XXHashAlgorithmImpl,
}


def get_algorithm(name: HashAlgorithmName) -> HashAlgorithm:
    """Instantiates the algorithm registered for `name`."""
    return ALGORITHMS[name]()


class ContentHasher(Hasher):
    """
    A hasher implementation that supports any algorithm via the HashAlgorithm interface.
    Digests are lowercase hex strings.
    """

    def __init__(self, algorithm: HashAlgorithm = None, chunk_size: int = HASH_CHUNK_SIZE):
        self.algorithm = algorithm or MD5AlgorithmImpl()
        self.chunk_size = chunk_size

    def hash(self, path: str) -> str:
        """
        Computes the digest of the file at `path`.

        Raises:
            OSError: the file is unreadable or vanished while being read.
        """
        state = self.algorithm.new()
        with open(path, 'rb') as f:
            while chunk := f.read(self.chunk_size):
                state.update(chunk)
        digest = state.hexdigest()
        logger.debug(f"Hashed {path}: {digest}")
        return digest


def is_hex_digest(digest: str, length: int) -> bool:
    """True if `digest` is a lowercase hex string of exactly `length` characters."""
    if not digest or len(digest) != length:
        return False
    return all(c in _HEX_DIGITS for c in digest)
