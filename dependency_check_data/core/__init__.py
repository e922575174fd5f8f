"""
Core modules for the Dependency Check data task.
"""

from .orchestrator import InstallationOrchestrator
from .downloader import Downloader
from .archive_installer import ArchiveInstaller
from .tool_runner import ToolRunner

__all__ = [
    "InstallationOrchestrator",
    "Downloader",
    "ArchiveInstaller",
    "ToolRunner"
]
