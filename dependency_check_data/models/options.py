"""
Dependency Check execution options.
"""

from enum import Enum
from typing import List
from pathlib import Path
from pydantic import BaseModel, Field

from .install import InstallRequest


LOG_FILE_NAME = "dependency-check-log.txt"


class CliArgument(str, Enum):
    """Dependency Check command line switches used by this task."""
    LOG_FILE = "--log"
    UPDATE_ONLY = "--updateonly"
    VERSION = "--version"


class ExecutionOptions(BaseModel):
    """Arguments for one Dependency Check invocation."""
    export_directory: Path = Field(..., description="Directory the data export is written to")
    log_file_path: Path = Field(..., description="Full path of the Dependency Check log file")
    verbose: bool = Field(default=False, description="Pass --log to the tool")
    update_only: bool = Field(default=False, description="Update data only, no scan")

    class Config:
        frozen = True

    @classmethod
    def from_request(cls, request: InstallRequest, default_output_dir: Path) -> "ExecutionOptions":
        """Options for one run; unset log/export directories fall back to default_output_dir."""
        log_directory = request.log_directory or Path(default_output_dir)
        return cls(
            export_directory=request.export_directory or Path(default_output_dir),
            log_file_path=log_directory / LOG_FILE_NAME,
            verbose=request.verbose,
            update_only=request.update_only,
        )

    @property
    def executable_arguments(self) -> List[str]:
        args: List[str] = []
        if self.update_only:
            args.append(CliArgument.UPDATE_ONLY.value)
        if self.verbose:
            args.extend([CliArgument.LOG_FILE.value, str(self.log_file_path)])
        return args

    @property
    def cli_argument_string(self) -> str:
        return " ".join(self.executable_arguments)
