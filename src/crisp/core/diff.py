"""Reconstruct file contents from commits and compare them with the parent."""

import difflib
from typing import List, Optional

from crisp.core.chain import CommitChain
from crisp.core.errors import CommitNotFoundError, CorruptChainError
from crisp.core.object_store import ObjectStore
from crisp.models.commit import Commit
from crisp.models.diff import FileDiff


class DiffEngine:
    """Resolves commit snapshots through the object store."""

    def __init__(self, store: ObjectStore, chain: CommitChain):
        self.store = store
        self.chain = chain

    def file_content_at(self, commit_digest: str, path: str) -> Optional[bytes]:
        """Content of *path* as recorded by a commit, or None if untracked."""
        record = self.chain.read_commit(commit_digest)
        digest = record.snapshot.get(path)
        if digest is None:
            return None
        return self.store.get(digest)

    def diff(self, commit_digest: str) -> List[FileDiff]:
        """Compare every file in a commit with the parent's version."""
        record = self.chain.read_commit(commit_digest)
        parent_snapshot = self._parent_snapshot(record)

        diffs = []
        for entry in record.files:
            parent_digest = parent_snapshot.get(entry.path)
            diffs.append(
                FileDiff(
                    path=entry.path,
                    digest=entry.digest,
                    content=self.store.get(entry.digest),
                    parent_digest=parent_digest,
                    parent_content=(
                        self.store.get(parent_digest) if parent_digest else None
                    ),
                )
            )
        return diffs

    def _parent_snapshot(self, record: Commit) -> dict:
        if record.parent is None:
            return {}
        try:
            return self.chain.read_commit(record.parent).snapshot
        except CommitNotFoundError as e:
            raise CorruptChainError(record.parent, record.id or "commit") from e


def render_unified_diff(file_diff: FileDiff, context: int = 3) -> str:
    """Render a line-level unified diff of a :class:`FileDiff` for display."""
    old_lines = _decode(file_diff.parent_content).splitlines(keepends=True)
    new_lines = _decode(file_diff.content).splitlines(keepends=True)
    from_file = "/dev/null" if file_diff.is_new else f"a/{file_diff.path}"
    lines = difflib.unified_diff(
        old_lines,
        new_lines,
        fromfile=from_file,
        tofile=f"b/{file_diff.path}",
        n=context,
    )
    return "".join(line if line.endswith("\n") else line + "\n" for line in lines)


def _decode(content: Optional[bytes]) -> str:
    if content is None:
        return ""
    return content.decode("utf-8", errors="replace")
