"""Repository configuration model."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from crisp.core.hashing import DEFAULT_ALGORITHM, SUPPORTED_ALGORITHMS

CONFIG_VERSION = "0.1.0"


class RepositoryConfig(BaseModel):
    """Settings stored in ``.crisp/config.json``."""

    version: str = CONFIG_VERSION
    created: datetime = Field(default_factory=datetime.now)
    hash_algorithm: str = DEFAULT_ALGORITHM

    @field_validator("hash_algorithm")
    @classmethod
    def _check_algorithm(cls, value: str) -> str:
        value = value.lower()
        if value not in SUPPORTED_ALGORITHMS:
            raise ValueError(
                f"hash_algorithm must be one of {', '.join(SUPPORTED_ALGORITHMS)}"
            )
        return value
