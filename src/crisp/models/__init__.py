"""Data models for crisp."""

from .commit import Commit, StagedEntry
from .config import RepositoryConfig
from .diff import FileDiff, FileStatus

__all__ = ["Commit", "StagedEntry", "RepositoryConfig", "FileDiff", "FileStatus"]
