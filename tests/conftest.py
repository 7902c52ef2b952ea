"""Shared test configuration for diffmark."""

import shutil
import subprocess

import pytest

from diffmark.core.diff.line_diff import LineSequenceDiff
from diffmark.core.merge.marker import DiffMarker
from diffmark.core.merge.three_way import ThreeWayMerger
from diffmark.services.file_io import FileIOService


@pytest.fixture
def differ():
    return LineSequenceDiff()


@pytest.fixture
def merger():
    return ThreeWayMerger()


@pytest.fixture
def marker(merger):
    return DiffMarker(merger)


@pytest.fixture
def file_service():
    return FileIOService()


@pytest.fixture
def git_repo(tmp_path, monkeypatch):
    """An empty git repository; git is not allowed to look above tmp_path."""
    if shutil.which("git") is None:
        pytest.skip("git is not available")

    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path.parent))
    repo = tmp_path / "repo"
    repo.mkdir()
    subprocess.run(["git", "init", "-q", str(repo)], check=True, capture_output=True)
    return repo
