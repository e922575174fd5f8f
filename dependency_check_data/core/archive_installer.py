"""
Archive extraction and installation directory cleanup.
"""

import re
import logging
import shutil
import zipfile
import zlib
from pathlib import Path
from typing import Iterable, List, Set

from ..errors import ExtractionError
from ..models.install import DownloadedArtifact


# Wipe a previous installation but keep its downloaded vulnerability data.
KEEP_DATA_PATTERNS = ["**", "!data", "!data/**"]


def _glob_to_regex(pattern: str) -> re.Pattern:
    """Translate a relative glob: '*' and '?' stay within one path segment, '**' spans any depth."""
    parts = []
    i = 0
    while i < len(pattern):
        if pattern.startswith("**/", i):
            parts.append("(?:.*/)?")
            i += 3
        elif pattern.startswith("**", i):
            parts.append(".*")
            i += 2
        elif pattern[i] == "*":
            parts.append("[^/]*")
            i += 1
        elif pattern[i] == "?":
            parts.append("[^/]")
            i += 1
        else:
            parts.append(re.escape(pattern[i]))
            i += 1
    return re.compile("".join(parts), re.DOTALL)


def match_patterns(root: Path, patterns: Iterable[str]) -> List[Path]:
    """
    Resolve glob patterns against every path below root.

    Patterns are relative to root and applied in order; a leading '!' removes
    the paths it matches from the set collected so far.
    """
    root = Path(root)
    candidates = {p.relative_to(root).as_posix(): p for p in root.rglob('*')}

    selected: Set[str] = set()
    for raw in patterns:
        negate = raw.startswith("!")
        pattern = raw[1:] if negate else raw
        regex = _glob_to_regex(pattern.strip("/") or "**")
        hits = {rel for rel in candidates if regex.fullmatch(rel)}
        if negate:
            selected -= hits
        else:
            selected |= hits

    return [candidates[rel] for rel in sorted(selected)]


class ArchiveInstaller:
    """Extracts installer archives and prunes stale installation content."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def prune_directory(self, path: Path, patterns: Iterable[str] = KEEP_DATA_PATTERNS) -> int:
        """
        Delete every path under `path` selected by `patterns`.

        Directories holding a preserved path are kept; only their matched
        contents go.

        Returns:
            Number of paths removed
        """
        path = Path(path)
        if not path.is_dir():
            return 0

        matched = match_patterns(path, patterns)
        matched_set = set(matched)
        removed = 0

        # Deepest first so kept descendants are known before their parents.
        for target in sorted(matched, key=lambda p: len(p.parts), reverse=True):
            if not target.exists() and not target.is_symlink():
                continue
            if target.is_dir() and not target.is_symlink():
                if any(p not in matched_set for p in target.rglob('*')):
                    continue
                shutil.rmtree(target)
            else:
                target.unlink()
            removed += 1

        self.logger.debug(f"Removed {removed} stale paths from {path}")
        return removed

    def extract_to(self, archive_path: Path, target_dir: Path) -> List[str]:
        """
        Extract all entries into target_dir, overwriting existing files.

        Returns:
            Names of the extracted entries

        Raises:
            ExtractionError: if the archive cannot be read or written out
        """
        self.logger.info(f"Extracting '{archive_path}' to '{target_dir}'")
        target_dir = Path(target_dir)
        target_dir.mkdir(parents=True, exist_ok=True)

        try:
            with zipfile.ZipFile(archive_path) as zf:
                names = zf.namelist()
                for info in zf.infolist():
                    extracted = Path(zf.extract(info, target_dir))
                    mode = (info.external_attr >> 16) & 0o777
                    if mode and not info.is_dir():
                        extracted.chmod(mode)
        except (zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError, OSError) as e:
            self.logger.error(f"Extracting '{archive_path}' failed")
            raise ExtractionError(f"Extracting '{archive_path}' failed: {e}") from e

        self.logger.info(f"Extracted '{archive_path}' to '{target_dir}' successfully")
        return names

    def install(self, artifact: DownloadedArtifact, target_dir: Path) -> List[str]:
        """Extract a downloaded archive, then delete it."""
        names = self.extract_to(artifact.path, target_dir)

        self.logger.debug("Unzipping complete, removing ZIP file now...")
        Path(artifact.path).unlink(missing_ok=True)
        self.logger.debug("ZIP file has been removed")

        return names
