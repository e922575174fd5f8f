"""
HTTP downloader for the Dependency Check installer archive.
"""

import logging
import posixpath
import shutil
from pathlib import Path
from typing import Any, Callable
from urllib.parse import urlparse, unquote
import urllib.request

from ..models.install import DownloadedArtifact


DEFAULT_FILE_NAME = "dependency-check.zip"
CHUNK_SIZE = 1024 * 1024


class Downloader:
    """Downloads a URL into the working directory with a fixed retry budget."""

    def __init__(self,
                 working_dir: Path,
                 retries: int = 5,
                 timeout: float = 60.0,
                 user_agent: str = "DC_AGENT",
                 urlopen: Callable[..., Any] = urllib.request.urlopen):
        """
        Initialize the downloader.

        Args:
            working_dir: Directory downloaded files are written to
            retries: Additional attempts after the first failure (no backoff)
            timeout: Socket timeout in seconds
            user_agent: User-Agent header
            urlopen: urlopen-compatible callable
        """
        self.logger = logging.getLogger(__name__)
        self.working_dir = Path(working_dir)
        self.retries = retries
        self.timeout = timeout
        self.user_agent = user_agent
        self._urlopen = urlopen

    @staticmethod
    def file_name_for(url: str) -> str:
        """Local file name derived from the URL path."""
        path = unquote(urlparse(url).path).replace("\\", "/")
        name = posixpath.basename(path)
        if name in ("", ".", ".."):
            return DEFAULT_FILE_NAME
        return name

    def download(self, url: str) -> DownloadedArtifact:
        """
        Download url to <working_dir>/<basename>.

        Every failed attempt is retried until the budget is spent; then the
        last error is re-raised unchanged.
        """
        target = self.working_dir / self.file_name_for(url)
        self.working_dir.mkdir(parents=True, exist_ok=True)

        tries_left = self.retries
        while True:
            try:
                self.logger.info(f'Downloading ZIP from "{url}"...')
                size = self._fetch(url, target)
                break
            except Exception as e:
                target.unlink(missing_ok=True)
                if tries_left <= 0:
                    self.logger.error(f"Download of {url} failed, no tries left: {e}")
                    raise
                self.logger.warning(f"Error trying to download ZIP ({tries_left} tries left): {e}")
                tries_left -= 1

        self.logger.debug(f"Downloaded ZIP file has been saved to {target} ({size} bytes)")
        return DownloadedArtifact(path=target, url=url, size_bytes=size)

    def _fetch(self, url: str, target: Path) -> int:
        request = urllib.request.Request(url)
        request.add_header("User-Agent", self.user_agent)

        with self._urlopen(request, timeout=self.timeout) as response:
            self.logger.debug("done downloading, saving downloaded ZIP file...")
            with open(target, 'wb') as f:
                shutil.copyfileobj(response, f, CHUNK_SIZE)
        return target.stat().st_size
