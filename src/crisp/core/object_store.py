"""Content-addressed object store.

Every blob and commit record lives in ``.crisp/objects/<digest>``, where the
digest is the hash of the exact bytes in the file. Blobs and commits share a
single namespace. The store is append-only: an object, once written, is
never modified or removed, and writing the same content twice is a no-op.
"""

import logging
from pathlib import Path
from typing import Iterator

from crisp.core.errors import ObjectNotFoundError
from crisp.core.fsutil import atomic_write
from crisp.core.hashing import DEFAULT_ALGORITHM, hash_content, is_digest

logger = logging.getLogger(__name__)


class ObjectStore:
    """Durable mapping from digest to immutable bytes."""

    def __init__(self, objects_dir: Path, algorithm: str = DEFAULT_ALGORITHM):
        self.objects_dir = Path(objects_dir)
        self.algorithm = algorithm

    def path_for(self, digest: str) -> Path:
        """Return the on-disk path of *digest* (which may not exist yet)."""
        if not is_digest(digest, self.algorithm):
            raise ObjectNotFoundError(digest)
        return self.objects_dir / digest

    def exists(self, digest: str) -> bool:
        """Check if an object is stored under *digest*."""
        if not is_digest(digest, self.algorithm):
            return False
        return (self.objects_dir / digest).is_file()

    def put(self, content: bytes) -> str:
        """Store *content* and return its digest."""
        digest = hash_content(content, self.algorithm)
        dest = self.objects_dir / digest
        if dest.exists():
            logger.debug("Object %s already in store, skipped", digest[:8])
            return digest
        atomic_write(dest, content)
        logger.debug("Stored object %s (%d bytes)", digest[:8], len(content))
        return digest

    def get(self, digest: str) -> bytes:
        """Return the bytes stored under *digest*."""
        path = self.path_for(digest)
        try:
            return path.read_bytes()
        except FileNotFoundError as e:
            raise ObjectNotFoundError(digest) from e

    def __contains__(self, digest: object) -> bool:
        return isinstance(digest, str) and self.exists(digest)

    def __iter__(self) -> Iterator[str]:
        if not self.objects_dir.is_dir():
            return
        for path in sorted(self.objects_dir.iterdir()):
            if path.is_file() and is_digest(path.name, self.algorithm):
                yield path.name

    def __len__(self) -> int:
        return sum(1 for _ in self)
