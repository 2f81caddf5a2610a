"""Unit tests for derived artifact freshness checks."""

import os
from pathlib import Path

import pytest

from courier.contexts.packaging.staleness import derived_path, is_fresh

A_WHILE_AGO = 524_000_000  # 1986-08-09
NOW = 1_760_000_000


def _touch(path: Path, mtime: int) -> Path:
    path.write_text("content")
    os.utime(path, (mtime, mtime))
    return path


@pytest.mark.unit
def test_derived_path_replaces_extension(tmp_path):
    assert derived_path(tmp_path / "resume.tex") == tmp_path / "resume.pdf"
    assert derived_path(tmp_path / "resume.tex", ".dvi") == tmp_path / "resume.dvi"


@pytest.mark.unit
def test_derived_path_only_replaces_last_extension(tmp_path):
    assert derived_path(tmp_path / "cover.letter.tex") == tmp_path / "cover.letter.pdf"


@pytest.mark.unit
def test_newer_artifact_is_fresh(tmp_path):
    source = _touch(tmp_path / "resume.tex", A_WHILE_AGO)
    artifact = _touch(tmp_path / "resume.pdf", NOW)

    assert is_fresh(source, artifact) is True


@pytest.mark.unit
def test_older_artifact_is_stale(tmp_path):
    source = _touch(tmp_path / "resume.tex", NOW)
    artifact = _touch(tmp_path / "resume.pdf", A_WHILE_AGO)

    assert is_fresh(source, artifact) is False


@pytest.mark.unit
def test_equal_timestamps_count_as_fresh(tmp_path):
    source = _touch(tmp_path / "resume.tex", NOW)
    artifact = _touch(tmp_path / "resume.pdf", NOW)

    assert is_fresh(source, artifact) is True


@pytest.mark.unit
def test_missing_artifact_is_stale_not_an_error(tmp_path):
    source = _touch(tmp_path / "resume.tex", NOW)

    assert is_fresh(source, tmp_path / "resume.pdf") is False


@pytest.mark.unit
def test_artifact_under_a_file_is_stale(tmp_path):
    """A path component that is a regular file means the artifact can't exist."""
    source = _touch(tmp_path / "resume.tex", NOW)

    assert is_fresh(source, source / "resume.pdf") is False


@pytest.mark.unit
def test_missing_source_raises(tmp_path):
    artifact = _touch(tmp_path / "resume.pdf", NOW)

    with pytest.raises(OSError):
        is_fresh(tmp_path / "resume.tex", artifact)
