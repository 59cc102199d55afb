"""crisp repository handle tying the store, index and commit chain together."""

import itertools
import logging
import posixpath
from pathlib import Path, PurePath
from typing import Iterator, List, Optional, Union

from crisp.core.chain import CommitChain
from crisp.core.config import load_config, save_config
from crisp.core.diff import DiffEngine
from crisp.core.errors import CommitNotFoundError, RepositoryNotInitializedError
from crisp.core.hashing import DEFAULT_ALGORITHM, is_digest
from crisp.core.index import StagingIndex
from crisp.core.object_store import ObjectStore
from crisp.models.commit import Commit, StagedEntry
from crisp.models.config import RepositoryConfig
from crisp.models.diff import FileDiff

logger = logging.getLogger(__name__)

CRISP_DIR = ".crisp"
MIN_PREFIX_LENGTH = 4

PathLike = Union[str, Path]


def find_project_root(start: Optional[Path] = None) -> Optional[Path]:
    """Walk up from *start* to the first directory holding a crisp repository."""
    current_dir = Path(start or Path.cwd()).resolve()
    for parent in [current_dir] + list(current_dir.parents):
        if (parent / CRISP_DIR).is_dir():
            return parent
    return None


class Repository:
    """A single crisp repository rooted at ``project_root``.

    The handle owns the staging index and head pointer in memory and writes
    them back to ``.crisp/`` on every mutating call.
    """

    def __init__(self, project_root: PathLike):
        self.project_root = Path(project_root).resolve()
        self.crisp_dir = self.project_root / CRISP_DIR
        self.objects_dir = self.crisp_dir / "objects"
        self.head_file = self.crisp_dir / "HEAD"
        self.index_file = self.crisp_dir / "index"
        self.config_file = self.crisp_dir / "config.json"
        self.journal_file = self.crisp_dir / "TXN"

        self._config: Optional[RepositoryConfig] = None
        self._store: Optional[ObjectStore] = None
        self._index: Optional[StagingIndex] = None
        self._chain: Optional[CommitChain] = None
        self._diff: Optional[DiffEngine] = None

    def exists(self) -> bool:
        """Check if the repository structures are present."""
        return self.objects_dir.is_dir() and self.head_file.exists()

    def init(self, hash_algorithm: str = DEFAULT_ALGORITHM) -> bool:
        """Create whatever repository structures are missing.

        Returns False, after logging a notice, when everything already existed.
        """
        created = False
        store_existed = self.objects_dir.is_dir()
        if not store_existed:
            self.objects_dir.mkdir(parents=True, exist_ok=True)
            created = True

        for path, initial in ((self.head_file, b""), (self.index_file, b"[]")):
            try:
                with open(path, "xb") as f:
                    f.write(initial)
                created = True
            except FileExistsError:
                pass

        if not self.config_file.exists():
            if store_existed and hash_algorithm != DEFAULT_ALGORITHM:
                # Objects written without a config are addressed by the default.
                logger.warning(
                    "Existing store in %s uses %s; ignoring requested %s",
                    self.objects_dir,
                    DEFAULT_ALGORITHM,
                    hash_algorithm,
                )
                hash_algorithm = DEFAULT_ALGORITHM
            config = RepositoryConfig(hash_algorithm=hash_algorithm)
            save_config(self.config_file, config)
            created = True

        if created:
            logger.info("Initialised empty crisp repository in %s", self.crisp_dir)
        else:
            logger.info("Already initialised in %s", self.crisp_dir)

        self._close()
        return created

    @property
    def config(self) -> RepositoryConfig:
        self._open()
        return self._config

    @property
    def store(self) -> ObjectStore:
        self._open()
        return self._store

    @property
    def index(self) -> StagingIndex:
        self._open()
        return self._index

    @property
    def chain(self) -> CommitChain:
        self._open()
        return self._chain

    @property
    def diff_engine(self) -> DiffEngine:
        self._open()
        return self._diff

    def add(self, path: PathLike) -> StagedEntry:
        """Store a file's current content and stage it for the next commit."""
        file_path = Path(path)
        if not file_path.is_absolute():
            file_path = Path.cwd() / file_path
        file_path = file_path.resolve()

        content = file_path.read_bytes()
        digest = self.store.put(content)
        return self.index.stage(self._tracked_path(file_path), digest)

    def status(self) -> List[StagedEntry]:
        """Entries staged for the next commit."""
        return self.index.current()

    def commit(self, message: str) -> str:
        """Commit the staging index and return the new commit digest."""
        return self.chain.commit(message)

    def head(self) -> Optional[str]:
        return self.chain.head()

    def read_commit(self, digest: str) -> Commit:
        return self.chain.read_commit(digest)

    def walk_history(self) -> Iterator[Commit]:
        """Lazily yield commits from HEAD to the root, newest first."""
        return self.chain.walk_history()

    def log(self, limit: Optional[int] = None) -> List[Commit]:
        """Return up to *limit* commits, newest first."""
        return list(itertools.islice(self.walk_history(), limit))

    def resolve(self, ref: str) -> str:
        """Turn ``HEAD``, a full digest or a unique digest prefix into a digest."""
        if ref == "HEAD":
            head = self.head()
            if head is None:
                raise CommitNotFoundError(ref, "not found (no commits yet)")
            return head

        ref = ref.lower()
        if is_digest(ref, self.config.hash_algorithm):
            return ref
        if len(ref) < MIN_PREFIX_LENGTH:
            raise CommitNotFoundError(ref, "prefix too short")

        matches = [digest for digest in self.store if digest.startswith(ref)]
        if len(matches) != 1:
            reason = "not found" if not matches else "prefix is ambiguous"
            raise CommitNotFoundError(ref, reason)
        return matches[0]

    def file_content_at(self, commit: str, path: PathLike) -> Optional[bytes]:
        """Content of *path* as of *commit*, or None if it was not tracked."""
        return self.diff_engine.file_content_at(commit, self._query_path(path))

    def diff(self, commit: str) -> List[FileDiff]:
        """Per-file content of *commit* alongside its parent's version."""
        return self.diff_engine.diff(commit)

    show_diff = diff

    def _open(self) -> None:
        if self._chain is not None:
            return
        if not self.exists():
            raise RepositoryNotInitializedError(
                f"No crisp repository at {self.project_root}. Run 'crisp init' first."
            )

        self._config = load_config(self.config_file)
        self._store = ObjectStore(self.objects_dir, self._config.hash_algorithm)
        self._index = StagingIndex(self.index_file)
        self._chain = CommitChain(
            self._store, self._index, self.head_file, self.journal_file
        )
        self._chain.recover()
        self._diff = DiffEngine(self._store, self._chain)

    def _close(self) -> None:
        self._config = self._store = self._index = self._chain = self._diff = None

    def _tracked_path(self, file_path: Path) -> str:
        try:
            return file_path.relative_to(self.project_root).as_posix()
        except ValueError:
            return file_path.as_posix()

    def _query_path(self, path: PathLike) -> str:
        if Path(path).is_absolute():
            return self._tracked_path(Path(path).resolve())
        return posixpath.normpath(PurePath(path).as_posix())
