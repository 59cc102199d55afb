"""Small filesystem helpers shared by the store, index and head."""

import os
from pathlib import Path


def atomic_write(path: Path, data: bytes) -> None:
    """Replace *path* with *data* so readers never see a partial file."""
    tmp = path.with_name(f".{path.name}.tmp")
    try:
        with open(tmp, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
