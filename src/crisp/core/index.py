"""Staging index: files selected for the next commit.

The index is kept in memory as an insertion-ordered mapping of path to
digest and written back to ``.crisp/index`` (a JSON list) after every
change. Staging a path a second time replaces its digest in place, so a
snapshot never tracks the same path twice.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from crisp.core.fsutil import atomic_write
from crisp.models.commit import StagedEntry

logger = logging.getLogger(__name__)


class StagingIndex:
    """Ordered path -> digest map persisted to a single file."""

    def __init__(self, index_file: Path):
        self.index_file = Path(index_file)
        self._entries: Dict[str, str] = self._load()

    def stage(self, path: str, digest: str) -> StagedEntry:
        """Record *path* at *digest* and persist the index."""
        previous = self._entries.get(path)
        self._entries[path] = digest
        self._save()
        if previous and previous != digest:
            logger.debug("Restaged %s: %s -> %s", path, previous[:8], digest[:8])
        else:
            logger.debug("Staged %s at %s", path, digest[:8])
        return StagedEntry(path=path, digest=digest)

    def current(self) -> List[StagedEntry]:
        """Return the staged entries in staging order."""
        return [
            StagedEntry(path=path, digest=digest)
            for path, digest in self._entries.items()
        ]

    def clear(self) -> None:
        """Persist an empty index."""
        self._entries = {}
        self._save()

    def reload(self) -> None:
        """Re-read the index from disk, discarding the in-memory copy."""
        self._entries = self._load()

    def get(self, path: str) -> Optional[str]:
        """Digest staged for *path*, if any."""
        return self._entries.get(path)

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def _load(self) -> Dict[str, str]:
        """Load the index file; a missing file is an empty index."""
        try:
            raw = self.index_file.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}

        entries: Dict[str, str] = {}
        for item in json.loads(raw or "[]"):
            entry = StagedEntry(**item)
            # Older index files may list a path more than once; keep the last.
            entries[entry.path] = entry.digest
        return entries

    def _save(self) -> None:
        data = [entry.model_dump() for entry in self.current()]
        atomic_write(self.index_file, json.dumps(data, indent=2).encode("utf-8"))
