"""Tests for the crisp command line interface."""

import pytest
from click.testing import CliRunner

from crisp.cli.main import main
from crisp.core.repository import Repository


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def invoke(runner, temp_project):
    """Invoke crisp against the temporary project."""

    def _invoke(*args):
        return runner.invoke(main, ["--repo-path", str(temp_project), *args])

    return _invoke


def test_init_and_reinit(invoke, temp_project):
    result = invoke("init")
    assert result.exit_code == 0
    assert "Initialized crisp" in result.output
    assert (temp_project / ".crisp" / "objects").is_dir()

    result = invoke("init")
    assert result.exit_code == 0
    assert "Already initialised" in result.output


def test_commands_require_init(invoke):
    result = invoke("status")
    assert result.exit_code != 0
    assert "not initialized" in result.output


def test_add_commit_log_cat(invoke, write_file):
    invoke("init")
    path = write_file("a.txt", "hello")

    result = invoke("add", str(path))
    assert result.exit_code == 0
    assert "aaf4c61ddcc5e8a2dabede0f3b482cd9aea9434d" in result.output
    assert "Added a.txt" in result.output

    result = invoke("commit", "-m", "first")
    assert result.exit_code == 0
    assert "commit success" in result.output

    head = Repository(path.parent).head()
    assert head in result.output

    result = invoke("log")
    assert result.exit_code == 0
    assert f"commit: {head}" in result.output
    assert "first" in result.output

    result = invoke("log", "--oneline")
    assert f"{head[:8]} first" in result.output

    result = invoke("cat", head[:8], "a.txt")
    assert result.exit_code == 0
    assert result.output == "hello"


def test_add_missing_file(invoke, temp_project):
    invoke("init")
    result = invoke("add", str(temp_project / "missing.txt"))

    assert result.exit_code != 0
    assert "Error" in result.output


def test_log_without_commits(invoke):
    invoke("init")
    result = invoke("log")

    assert result.exit_code == 0
    assert "No commits yet" in result.output


def test_show_diff_against_parent(invoke, write_file):
    invoke("init")
    path = write_file("a.txt", "v1\n")
    invoke("add", str(path))
    invoke("commit", "-m", "commit1")
    path.write_text("v2\n")
    invoke("add", str(path))
    invoke("add", str(write_file("b.txt", "brand new\n")))
    invoke("commit", "-m", "commit2")

    result = invoke("show")

    assert result.exit_code == 0
    assert "commit2" in result.output
    assert "a.txt" in result.output
    assert "-v1" in result.output
    assert "+v2" in result.output
    assert "New file" in result.output


def test_show_unknown_commit(invoke):
    invoke("init")
    result = invoke("show", "deadbeef")

    assert result.exit_code != 0
    assert "Commit not found" in result.output


def test_cat_untracked_path(invoke, write_file):
    invoke("init")
    invoke("add", str(write_file("a.txt", "hello")))
    invoke("commit", "-m", "first")

    result = invoke("cat", "HEAD", "b.txt")

    assert result.exit_code != 0
    assert "not tracked" in result.output


def test_status_lists_staged_files(invoke, write_file):
    invoke("init")
    result = invoke("status")
    assert "Nothing staged" in result.output

    invoke("add", str(write_file("a.txt", "hello")))
    result = invoke("status")

    assert result.exit_code == 0
    assert "a.txt" in result.output
    assert "no commits yet" in result.output


def test_repo_path_from_environment(runner, temp_project):
    result = runner.invoke(main, ["init"], env={"CRISP_REPO": str(temp_project)})

    assert result.exit_code == 0
    assert Repository(temp_project).exists()


@pytest.mark.parametrize("limit", ["0", "-1"])
def test_log_rejects_non_positive_limit(invoke, limit):
    invoke("init")
    invoke("commit", "-m", "first")

    result = invoke("log", "--limit", limit)

    assert result.exit_code == 2
    assert "Invalid value" in result.output
    assert "No commits yet" not in result.output


def test_log_limit(invoke):
    invoke("init")
    invoke("commit", "-m", "first")
    invoke("commit", "-m", "second")

    result = invoke("log", "--limit", "1", "--oneline")

    assert result.exit_code == 0
    assert "second" in result.output
    assert "first" not in result.output
