"""Tests for the staging index."""

import json

from crisp.core.index import StagingIndex
from crisp.models.commit import StagedEntry


def test_missing_index_file_is_empty(temp_project):
    index = StagingIndex(temp_project / "index")

    assert index.current() == []
    assert len(index) == 0


def test_stage_persists_in_order(temp_project):
    index_file = temp_project / "index"
    index = StagingIndex(index_file)

    index.stage("b.txt", "1" * 40)
    index.stage("a.txt", "2" * 40)

    assert [e.path for e in index.current()] == ["b.txt", "a.txt"]
    on_disk = json.loads(index_file.read_text())
    assert on_disk == [
        {"path": "b.txt", "digest": "1" * 40},
        {"path": "a.txt", "digest": "2" * 40},
    ]

    reloaded = StagingIndex(index_file)
    assert reloaded.current() == index.current()


def test_restaging_a_path_keeps_one_entry(temp_project):
    """The last staged digest wins and the path keeps its first position."""
    index = StagingIndex(temp_project / "index")

    index.stage("a.txt", "1" * 40)
    index.stage("b.txt", "2" * 40)
    index.stage("a.txt", "3" * 40)

    assert index.current() == [
        StagedEntry(path="a.txt", digest="3" * 40),
        StagedEntry(path="b.txt", digest="2" * 40),
    ]
    assert index.get("a.txt") == "3" * 40
    assert "a.txt" in index


def test_legacy_index_with_duplicates_collapses(temp_project):
    index_file = temp_project / "index"
    index_file.write_text(
        json.dumps(
            [
                {"path": "a.txt", "digest": "1" * 40},
                {"path": "b.txt", "digest": "2" * 40},
                {"path": "a.txt", "digest": "3" * 40},
            ]
        )
    )

    index = StagingIndex(index_file)

    assert len(index) == 2
    assert index.get("a.txt") == "3" * 40


def test_clear_persists_empty_list(temp_project):
    index_file = temp_project / "index"
    index = StagingIndex(index_file)
    index.stage("a.txt", "1" * 40)

    index.clear()

    assert index.current() == []
    assert json.loads(index_file.read_text()) == []


def test_empty_index_file_is_empty(temp_project):
    index_file = temp_project / "index"
    index_file.write_text("")

    assert StagingIndex(index_file).current() == []
