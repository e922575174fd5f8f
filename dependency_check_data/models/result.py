"""
Run result models.
"""

from enum import Enum
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field


class TaskResult(str, Enum):
    """Result values understood by the pipeline agent."""
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"


class RunResult(BaseModel):
    """Outcome of one install/update run."""
    requested_version: str = Field(..., description="Version asked for")
    success: bool = Field(default=False, description="Overall success status")
    install_path: Optional[str] = Field(None, description="Dependency Check installation directory")
    download_url: Optional[str] = Field(None, description="URL the installer was downloaded from")
    tool_exit_code: Optional[int] = Field(None, description="Exit code of the data update")
    error: Optional[str] = Field(None, description="Error message if failed")

    # Timing
    started_at: datetime = Field(default_factory=datetime.utcnow)
    completed_at: Optional[datetime] = None
    duration_seconds: Optional[float] = None

    def complete(self, success: bool, error: Optional[str] = None) -> None:
        """Mark the run as complete."""
        self.success = success
        if error:
            self.error = error
        self.completed_at = datetime.utcnow()
        if self.started_at:
            self.duration_seconds = (self.completed_at - self.started_at).total_seconds()

    @property
    def task_result(self) -> TaskResult:
        return TaskResult.SUCCEEDED if self.success else TaskResult.FAILED

    class Config:
        json_schema_extra = {
            "example": {
                "requested_version": "latest",
                "success": True,
                "install_path": "/agent/_work/1/s/dependency-check",
                "download_url": "https://github.com/jeremylong/DependencyCheck/releases/download/v9.0.9/dependency-check-9.0.9-release.zip",
                "tool_exit_code": 0,
                "duration_seconds": 312.4
            }
        }
