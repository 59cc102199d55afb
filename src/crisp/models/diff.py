"""Per-file comparison between a commit and its parent."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class FileStatus(str, Enum):
    """How a file in a commit relates to the parent's version."""

    ADDED = "added"
    MODIFIED = "modified"
    UNCHANGED = "unchanged"


class FileDiff(BaseModel):
    """Whole-file content of a path in a commit and in its parent."""

    path: str
    digest: str
    content: bytes
    parent_digest: Optional[str] = None
    parent_content: Optional[bytes] = None

    @property
    def is_new(self) -> bool:
        """True when the parent commit does not track this path."""
        return self.parent_digest is None

    @property
    def status(self) -> FileStatus:
        if self.is_new:
            return FileStatus.ADDED
        if self.parent_digest == self.digest:
            return FileStatus.UNCHANGED
        return FileStatus.MODIFIED
