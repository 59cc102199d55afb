"""Content hashing for the object store."""

import hashlib
import re

SUPPORTED_ALGORITHMS = ("sha1", "sha256")
DEFAULT_ALGORITHM = "sha1"


def hash_content(content: bytes, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """Return the hex digest of the exact bytes in *content*."""
    if algorithm not in SUPPORTED_ALGORITHMS:
        raise ValueError(f"Unsupported hash algorithm: {algorithm}")
    return hashlib.new(algorithm, content).hexdigest()


def digest_length(algorithm: str = DEFAULT_ALGORITHM) -> int:
    """Number of hex characters produced by *algorithm*."""
    if algorithm not in SUPPORTED_ALGORITHMS:
        raise ValueError(f"Unsupported hash algorithm: {algorithm}")
    return hashlib.new(algorithm).digest_size * 2


def is_digest(value: str, algorithm: str = DEFAULT_ALGORITHM) -> bool:
    """Check that *value* looks like a digest produced by *algorithm*."""
    if not isinstance(value, str):
        return False
    return re.fullmatch(f"[0-9a-f]{{{digest_length(algorithm)}}}", value) is not None
