"""Shared fixtures for crisp tests."""

import tempfile
from pathlib import Path

import pytest

from crisp.core.repository import Repository


@pytest.fixture
def temp_project():
    """Create an empty temporary project directory."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir).resolve()


@pytest.fixture
def repo(temp_project):
    """Create an initialized crisp repository."""
    repository = Repository(temp_project)
    repository.init()
    return repository


@pytest.fixture
def write_file(temp_project):
    """Write a file under the project root and return its path."""

    def _write(name: str, content: str) -> Path:
        path = temp_project / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content.encode("utf-8"))
        return path

    return _write
