"""
Data models for the Dependency Check data task.
"""

from .install import InstallRequest, ResolvedPackageLocation, DownloadedArtifact
from .options import ExecutionOptions, CliArgument, LOG_FILE_NAME
from .result import RunResult, TaskResult

__all__ = [
    "InstallRequest",
    "ResolvedPackageLocation",
    "DownloadedArtifact",
    "ExecutionOptions",
    "CliArgument",
    "LOG_FILE_NAME",
    "RunResult",
    "TaskResult"
]
