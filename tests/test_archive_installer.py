"""
Tests for archive extraction and installation directory pruning.
"""

import io
import os
import sys
import zipfile
import zlib
from unittest.mock import patch

import pytest

from dependency_check_data.core.archive_installer import (
    ArchiveInstaller,
    KEEP_DATA_PATTERNS,
    match_patterns,
)
from dependency_check_data.errors import ExtractionError
from dependency_check_data.models.install import DownloadedArtifact

from helpers import build_zip


@pytest.fixture
def previous_install(tmp_path):
    """A prior installation with downloaded vulnerability data."""
    root = tmp_path / "dependency-check"
    (root / "bin").mkdir(parents=True)
    (root / "bin" / "dependency-check.sh").write_text("old")
    (root / "lib" / "nested").mkdir(parents=True)
    (root / "lib" / "old.jar").write_text("old")
    (root / "lib" / "nested" / "deep.jar").write_text("old")
    (root / "data" / "cache").mkdir(parents=True)
    (root / "data" / "odc.mv.db").write_text("db")
    (root / "data" / "cache" / "central.json").write_text("{}")
    (root / "LICENSE.txt").write_text("license")
    return root


class TestMatchPatterns:
    """Glob pattern resolution with negation."""

    def test_negated_patterns_exclude_subtree(self, previous_install):
        matched = {p.relative_to(previous_install).as_posix()
                   for p in match_patterns(previous_install, KEEP_DATA_PATTERNS)}

        assert "lib/nested/deep.jar" in matched
        assert "LICENSE.txt" in matched
        assert not any(m == "data" or m.startswith("data/") for m in matched)

    def test_patterns_are_applied_in_order(self, previous_install):
        matched = {p.relative_to(previous_install).as_posix()
                   for p in match_patterns(previous_install, ["!lib/**", "lib/**"])}

        assert "lib/old.jar" in matched

    def test_single_star_stays_in_one_segment(self, previous_install):
        (previous_install / "lib" / "notes.txt").write_text("nested")

        matched = {p.relative_to(previous_install).as_posix()
                   for p in match_patterns(previous_install, ["*.txt"])}

        assert matched == {"LICENSE.txt"}

    def test_double_star_crosses_segments(self, previous_install):
        (previous_install / "lib" / "notes.txt").write_text("nested")

        matched = {p.relative_to(previous_install).as_posix()
                   for p in match_patterns(previous_install, ["**/*.txt"])}

        assert matched == {"LICENSE.txt", "lib/notes.txt"}

    def test_question_mark_does_not_match_separator(self, previous_install):
        matched = {p.relative_to(previous_install).as_posix()
                   for p in match_patterns(previous_install, ["lib?old.jar", "lib/old.ja?"])}

        assert matched == {"lib/old.jar"}


class TestPruneDirectory:
    """Cleanup of a prior installation."""

    def test_keeps_only_data(self, previous_install):
        installer = ArchiveInstaller()

        installer.prune_directory(previous_install, ["**", "!data", "!data/**"])

        remaining = sorted(p.relative_to(previous_install).as_posix()
                           for p in previous_install.rglob("*"))
        assert remaining == ["data", "data/cache", "data/cache/central.json", "data/odc.mv.db"]
        assert (previous_install / "data" / "odc.mv.db").read_text() == "db"

    def test_directory_with_preserved_content_is_not_removed(self, previous_install):
        installer = ArchiveInstaller()

        installer.prune_directory(previous_install, ["**", "!data/odc.mv.db"])

        assert (previous_install / "data" / "odc.mv.db").exists()
        assert not (previous_install / "data" / "cache").exists()
        assert not (previous_install / "lib").exists()

    def test_missing_directory_is_noop(self, tmp_path):
        assert ArchiveInstaller().prune_directory(tmp_path / "absent") == 0

    def test_empty_pattern_set_removes_nothing(self, previous_install):
        assert ArchiveInstaller().prune_directory(previous_install, []) == 0
        assert (previous_install / "lib" / "old.jar").exists()


class TestExtract:
    """ZIP extraction."""

    def test_extracts_and_overwrites(self, tmp_path):
        archive = tmp_path / "dc.zip"
        archive.write_bytes(build_zip({
            "dependency-check/bin/dependency-check.sh": "new",
            "dependency-check/lib/core.jar": "jar",
        }, executables=("dependency-check/bin/dependency-check.sh",)))
        target = tmp_path / "work"
        (target / "dependency-check" / "bin").mkdir(parents=True)
        (target / "dependency-check" / "bin" / "dependency-check.sh").write_text("old")

        names = ArchiveInstaller().extract_to(archive, target)

        assert "dependency-check/lib/core.jar" in names
        assert (target / "dependency-check" / "bin" / "dependency-check.sh").read_text() == "new"
        assert (target / "dependency-check" / "lib" / "core.jar").read_text() == "jar"

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
    def test_keeps_executable_bit(self, tmp_path):
        archive = tmp_path / "dc.zip"
        archive.write_bytes(build_zip({"bin/run.sh": "#!/bin/sh\n"}, executables=("bin/run.sh",)))

        ArchiveInstaller().extract_to(archive, tmp_path / "out")

        assert os.access(tmp_path / "out" / "bin" / "run.sh", os.X_OK)

    def test_corrupt_archive_raises(self, tmp_path):
        archive = tmp_path / "broken.zip"
        archive.write_bytes(b"this is not a zip file")

        with pytest.raises(ExtractionError):
            ArchiveInstaller().extract_to(archive, tmp_path / "out")

    @pytest.mark.parametrize("error", [
        zlib.error("invalid stored block lengths"),
        EOFError("truncated member"),
        NotImplementedError("compression type 99"),
    ])
    def test_unreadable_member_raises(self, tmp_path, error):
        archive = tmp_path / "dc.zip"
        archive.write_bytes(build_zip({"dependency-check/README.md": "hi"}))

        with patch.object(zipfile.ZipFile, "extract", side_effect=error):
            with pytest.raises(ExtractionError):
                ArchiveInstaller().extract_to(archive, tmp_path / "out")

    def test_corrupt_deflate_data_raises(self, tmp_path):
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            zf.writestr("dependency-check/lib/core.jar", b"jar contents " * 500)
        data = bytearray(buffer.getvalue())
        header_end = 30 + len("dependency-check/lib/core.jar")
        for i in range(header_end, header_end + 8):
            data[i] ^= 0xFF
        archive = tmp_path / "dc.zip"
        archive.write_bytes(bytes(data))

        with pytest.raises(ExtractionError):
            ArchiveInstaller().extract_to(archive, tmp_path / "out")

    def test_install_removes_archive(self, tmp_path):
        archive = tmp_path / "dc.zip"
        archive.write_bytes(build_zip({"dependency-check/README.md": "hi"}))
        artifact = DownloadedArtifact(path=archive, url="https://host/dc.zip")

        ArchiveInstaller().install(artifact, tmp_path)

        assert not archive.exists()
        assert (tmp_path / "dependency-check" / "README.md").read_text() == "hi"

    def test_install_keeps_archive_on_failure(self, tmp_path):
        archive = tmp_path / "dc.zip"
        archive.write_bytes(b"garbage")
        artifact = DownloadedArtifact(path=archive, url="https://host/dc.zip")

        with pytest.raises(ExtractionError):
            ArchiveInstaller().install(artifact, tmp_path / "out")

        assert archive.exists()
