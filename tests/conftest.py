"""
Shared fixtures for the Dependency Check data task tests.
"""

import pytest

from helpers import LAUNCHER_SCRIPT, ZIP_URL, build_zip, release_json


@pytest.fixture
def dependency_check_zip() -> bytes:
    """Installer archive shaped like the real release ZIP."""
    return build_zip(
        {
            "dependency-check/bin/dependency-check.sh": LAUNCHER_SCRIPT,
            "dependency-check/bin/dependency-check.bat": "@echo off\r\n",
            "dependency-check/lib/dependency-check-core-9.0.9.jar": "jar",
            "dependency-check/README.md": "readme",
        },
        executables=("dependency-check/bin/dependency-check.sh",),
    )


@pytest.fixture
def zip_release() -> bytes:
    return release_json([
        {"content_type": "application/zip", "browser_download_url": ZIP_URL},
        {"content_type": "application/gzip", "browser_download_url": ZIP_URL + ".asc"},
    ])
