"""Exception hierarchy for crisp repositories."""


class CrispError(Exception):
    """Base class for all crisp errors."""


class NotFoundError(CrispError, LookupError):
    """A digest, commit or path has no corresponding entry."""


class ObjectNotFoundError(NotFoundError):
    """No object is stored under the requested digest."""

    def __init__(self, digest: str):
        super().__init__(f"Object not found: {digest}")
        self.digest = digest


class CommitNotFoundError(NotFoundError):
    """The digest does not resolve to a valid commit record."""

    def __init__(self, digest: str, reason: str = "not found"):
        super().__init__(f"Commit {reason}: {digest}")
        self.digest = digest


class CorruptChainError(CrispError):
    """A head or parent link points at something that is not a commit."""

    def __init__(self, digest: str, referenced_by: str = "HEAD"):
        super().__init__(
            f"Broken commit chain: {referenced_by} references {digest}, "
            "which does not resolve to a commit"
        )
        self.digest = digest
        self.referenced_by = referenced_by


class RepositoryNotInitializedError(CrispError):
    """The repository directory has not been initialised."""
