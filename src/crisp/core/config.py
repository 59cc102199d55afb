"""Load and save the repository configuration file."""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from crisp.core.errors import CrispError
from crisp.core.fsutil import atomic_write
from crisp.models.config import RepositoryConfig

logger = logging.getLogger(__name__)


def load_config(config_file: Path) -> RepositoryConfig:
    """Read ``config.json``; repositories without one get the defaults."""
    if not config_file.exists():
        logger.debug("No config at %s, using defaults", config_file)
        return RepositoryConfig()

    try:
        return RepositoryConfig(**json.loads(config_file.read_text(encoding="utf-8")))
    except (json.JSONDecodeError, ValidationError) as e:
        raise CrispError(f"Invalid repository config {config_file}: {e}") from e


def save_config(config_file: Path, config: RepositoryConfig) -> None:
    data = json.loads(config.model_dump_json())
    atomic_write(config_file, json.dumps(data, indent=2).encode("utf-8"))
