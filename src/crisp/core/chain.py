"""Commit chain: commit records, the head pointer and history traversal.

Commits form a singly linked list through their ``parent`` digests, with
``HEAD`` naming the newest one. A commit touches three files (the commit
object, ``HEAD`` and ``index``), so it is made all-or-nothing with a small
journal: once the commit object is stored, the new head is written to
``TXN`` in a single atomic replace before ``HEAD`` and ``index`` are updated.
If the process dies part way through, :meth:`CommitChain.recover` finishes
the commit the next time the repository is opened.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional

from crisp.core.errors import (
    CommitNotFoundError,
    CorruptChainError,
    ObjectNotFoundError,
)
from crisp.core.fsutil import atomic_write
from crisp.core.index import StagingIndex
from crisp.core.object_store import ObjectStore
from crisp.models.commit import Commit

logger = logging.getLogger(__name__)


class CommitChain:
    """Append-only history of commits reachable from HEAD."""

    def __init__(
        self,
        store: ObjectStore,
        index: StagingIndex,
        head_file: Path,
        journal_file: Path,
    ):
        self.store = store
        self.index = index
        self.head_file = Path(head_file)
        self.journal_file = Path(journal_file)
        self._head: Optional[str] = self._read_head()

    def head(self) -> Optional[str]:
        """Digest of the newest commit, or None before the first commit."""
        return self._head

    def commit(self, message: str) -> str:
        """Record the staged files as a new commit and return its digest."""
        record = Commit(
            timestamp=datetime.now(timezone.utc),
            message=message,
            files=self.index.current(),
            parent=self._head,
        )
        digest = self.store.put(record.serialize())
        self._advance(digest)
        logger.info(
            "Committed %s (%d files, parent %s)",
            digest[:8],
            len(record.files),
            record.parent[:8] if record.parent else "none",
        )
        return digest

    def read_commit(self, digest: str) -> Commit:
        """Load the commit stored under *digest*."""
        try:
            raw = self.store.get(digest)
        except ObjectNotFoundError as e:
            raise CommitNotFoundError(digest) from e

        try:
            record = Commit.model_validate_json(raw)
        except ValueError as e:
            raise CommitNotFoundError(digest, "is not a valid commit record") from e
        record.id = digest
        return record

    def walk_history(self) -> Iterator[Commit]:
        """Yield commits from HEAD back to the root commit, newest first."""
        digest = self._head
        referenced_by = "HEAD"
        while digest:
            try:
                record = self.read_commit(digest)
            except CommitNotFoundError as e:
                raise CorruptChainError(digest, referenced_by) from e
            yield record
            referenced_by = digest
            digest = record.parent

    def recover(self) -> bool:
        """Finish a commit interrupted after its journal entry was written.

        Returns True when a pending commit was rolled forward.
        """
        try:
            pending = json.loads(self.journal_file.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return False
        except ValueError:
            # Journal writes are atomic; an unreadable one never reached HEAD.
            logger.warning("Discarding unreadable journal %s", self.journal_file)
            self.journal_file.unlink()
            return False

        digest = pending.get("head")
        if not digest or not self.store.exists(digest):
            logger.warning("Discarding journal pointing at missing commit %s", digest)
            self.journal_file.unlink()
            return False

        if self._head not in (pending.get("parent"), digest):
            logger.warning(
                "Discarding journal for %s: HEAD moved to %s", digest[:8], self._head
            )
            self.journal_file.unlink()
            return False

        logger.info("Completing interrupted commit %s", digest[:8])
        self._finish(digest)
        return True

    def _advance(self, digest: str) -> None:
        atomic_write(
            self.journal_file,
            json.dumps({"head": digest, "parent": self._head}).encode("utf-8"),
        )
        self._finish(digest)

    def _finish(self, digest: str) -> None:
        atomic_write(self.head_file, digest.encode("utf-8"))
        self.index.clear()
        self.journal_file.unlink()
        self._head = digest

    def _read_head(self) -> Optional[str]:
        try:
            value = self.head_file.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        return value or None
