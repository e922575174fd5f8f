"""
Install request and package location models.
"""

from typing import Optional
from pathlib import Path
from pydantic import BaseModel, Field


class InstallRequest(BaseModel):
    """Task inputs for a single run. None means the input was not set."""
    requested_version: str = Field(default="latest", description="Dependency Check version or 'latest'")
    custom_source_url: Optional[str] = Field(None, description="Direct ZIP URL, bypasses release lookup")
    local_install_path: Optional[Path] = Field(None, description="Pre-existing installation to use")
    export_directory: Optional[Path] = Field(None, description="Export directory")
    log_directory: Optional[Path] = Field(None, description="Log directory")
    verbose: bool = Field(default=False, description="Write a Dependency Check log file")
    update_only: bool = Field(default=True, description="Run the data update after installing")

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "requested_version": "latest",
                "custom_source_url": None,
                "local_install_path": None,
                "verbose": True,
                "update_only": True
            }
        }

    @property
    def has_local_installation(self) -> bool:
        return self.local_install_path is not None


class ResolvedPackageLocation(BaseModel):
    """Where the installer ZIP for this run comes from."""
    download_url: str = Field(..., description="URL of the installer ZIP")
    version: str = Field(..., description="Requested version")
    from_custom_source: bool = Field(default=False, description="URL was supplied by the caller")

    class Config:
        frozen = True


class DownloadedArtifact(BaseModel):
    """A downloaded archive waiting to be extracted."""
    path: Path = Field(..., description="Local file path")
    url: str = Field(..., description="Source URL")
    size_bytes: int = Field(default=0, description="Bytes written")
