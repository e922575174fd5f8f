"""
Dependency Check release resolver.
Validates the requested version and finds the installer ZIP on GitHub releases.
"""

import re
import json
import logging
from typing import Any, Callable, Dict, Optional
import urllib.request
import urllib.error
import os

from ..errors import ReleaseAssetNotFoundError, ReleaseResolutionError
from ..models.install import ResolvedPackageLocation


VERSION_LATEST = "latest"
ZIP_CONTENT_TYPE = "application/zip"

# Single digit components only; 10.0.0 is rejected.
_VERSION_PATTERN = re.compile(r'(\d\.\d\.\d|' + VERSION_LATEST + r')', re.IGNORECASE | re.ASCII)


def validate_format(version: Optional[str]) -> bool:
    """Return True for 'latest' (any case) or an x.y.z version."""
    if not version:
        return False
    return _VERSION_PATTERN.fullmatch(version) is not None


class ReleaseResolver:
    """
    Resolves the installer download URL for a Dependency Check version.
    A custom source URL, when given, always wins over the release lookup.
    """

    def __init__(self,
                 release_api_url: str,
                 custom_source_url: Optional[str] = None,
                 github_token: Optional[str] = None,
                 timeout: float = 60.0,
                 user_agent: str = "DC_AGENT",
                 urlopen: Callable[..., Any] = urllib.request.urlopen):
        self.logger = logging.getLogger(__name__)
        self.release_api_url = release_api_url.rstrip("/")
        self.custom_source_url = custom_source_url
        self.github_token = github_token or os.environ.get('GITHUB_TOKEN')
        self.timeout = timeout
        self.user_agent = user_agent
        self._urlopen = urlopen

    def release_metadata_url(self, version: str) -> str:
        """Release endpoint for a version: /latest or /tags/v<version>."""
        if version.lower() == VERSION_LATEST:
            return f"{self.release_api_url}/{VERSION_LATEST}"
        return f"{self.release_api_url}/tags/v{version}"

    def resolve_download_url(self, version: str) -> ResolvedPackageLocation:
        """
        Determine where to download the installer from.

        Args:
            version: 'latest' or x.y.z

        Returns:
            ResolvedPackageLocation with the ZIP download URL
        """
        if self.custom_source_url:
            self.logger.info(f"Downloading Dependency Check installer from {self.custom_source_url}...")
            return ResolvedPackageLocation(
                download_url=self.custom_source_url,
                version=version,
                from_custom_source=True
            )

        self.logger.info(f"Downloading Dependency Check {version} installer from GitHub...")
        self.logger.debug("Determine GitHub package URL...")

        release = self._fetch_release(version)
        package_url = self._find_zip_asset(release, version)

        self.logger.debug(f"Determined GitHub package URL: {package_url}")
        return ResolvedPackageLocation(download_url=package_url, version=version)

    def _fetch_release(self, version: str) -> Dict[str, Any]:
        """Fetch release metadata from the GitHub API."""
        url = self.release_metadata_url(version)

        request = urllib.request.Request(url)
        if self.github_token:
            request.add_header("Authorization", f"token {self.github_token}")
        request.add_header("Accept", "application/vnd.github.v3+json")
        request.add_header("User-Agent", self.user_agent)

        try:
            with self._urlopen(request, timeout=self.timeout) as response:
                return json.loads(response.read().decode())
        except urllib.error.HTTPError as e:
            if e.code == 404:
                raise ReleaseAssetNotFoundError(f"Dependency Check release v{version} not found ({url})")
            elif e.code == 403:
                raise ReleaseResolutionError(
                    "GitHub API rate limit exceeded. Set GITHUB_TOKEN to increase limit."
                )
            else:
                raise ReleaseResolutionError(f"GitHub API error: {e.code}")
        except urllib.error.URLError as e:
            raise ReleaseResolutionError(f"Failed to fetch release metadata from {url}: {e.reason}") from e
        except ValueError as e:
            raise ReleaseResolutionError(f"Invalid release metadata from {url}: {e}") from e

    def _find_zip_asset(self, release: Dict[str, Any], version: str) -> str:
        assets = release.get("assets") if isinstance(release, dict) else None
        for asset in assets or []:
            if asset.get("content_type") == ZIP_CONTENT_TYPE and asset.get("browser_download_url"):
                return asset["browser_download_url"]
        raise ReleaseAssetNotFoundError(
            f"No {ZIP_CONTENT_TYPE} asset found in Dependency Check release '{version}'"
        )
