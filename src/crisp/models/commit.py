"""Commit and staged-entry models."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class StagedEntry(BaseModel):
    """A tracked file path and the digest of its staged content."""

    path: str
    digest: str

    model_config = {"frozen": True}


class Commit(BaseModel):
    """An immutable snapshot of staged files plus a link to its parent."""

    timestamp: datetime
    message: str
    files: List[StagedEntry] = []
    parent: Optional[str] = None

    # Digest of the serialized record; known once stored or loaded.
    id: Optional[str] = Field(default=None, exclude=True)

    model_config = {"extra": "forbid"}

    @property
    def is_root(self) -> bool:
        """Check if this is the first commit of the chain."""
        return self.parent is None

    @property
    def snapshot(self) -> Dict[str, str]:
        """Map of path to digest captured by this commit."""
        return {entry.path: entry.digest for entry in self.files}

    def serialize(self) -> bytes:
        """Bytes stored in the object store; the commit digest covers these."""
        return self.model_dump_json().encode("utf-8")
