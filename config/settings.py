"""
Configuration settings for the Dependency Check data task.

Host inputs arrive as environment variables exported by the pipeline agent
(INPUT_*, BUILD_*, SYSTEM_DEBUG). Unset path inputs are delivered by the agent
as the build sources directory; that value is translated to None here.
"""

from typing import Optional
from pathlib import Path
from pydantic import BaseModel, Field, validator
from pydantic_settings import BaseSettings

from dependency_check_data.models.install import InstallRequest


DEPENDENCY_CHECK_FOLDER_NAME = "dependency-check"
DEPENDENCY_CHECK_VERSION_LATEST = "latest"
DEPENDENCY_CHECK_RELEASE_API = "https://api.github.com/repos/jeremylong/DependencyCheck/releases"


class HttpConfig(BaseModel):
    """HTTP client configuration."""
    timeout_seconds: float = Field(default=60.0, description="Socket timeout for HTTP requests")
    download_retries: int = Field(default=5, ge=0, description="Additional download attempts after the first")
    user_agent: str = Field(default="DC_AGENT", description="User-Agent header sent with requests")


class RunnerConfig(BaseModel):
    """Dependency Check invocation configuration."""
    java_opts: str = Field(default="-Xss8192k", description="JAVA_OPTS exported to the tool")
    update_timeout_seconds: Optional[int] = Field(
        default=None, description="Terminate the update after this many seconds"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = Field(default="INFO", description="Logging level")
    format: str = Field(default="%(message)s", description="Console log format")
    file_path: Optional[Path] = Field(default=None, description="Optional rotating log file")
    max_file_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(default=5, description="Number of log backups to keep")


class Settings(BaseSettings):
    """Main task settings."""
    # Task inputs
    dependency_check_version: str = Field(
        default=DEPENDENCY_CHECK_VERSION_LATEST, validation_alias="INPUT_DEPENDENCYCHECKVERSION"
    )
    custom_repo_url: Optional[str] = Field(default=None, validation_alias="INPUT_CUSTOMREPOURL")
    local_install_path: Optional[str] = Field(default=None, validation_alias="INPUT_LOCALINSTALLPATH")
    log_directory: Optional[str] = Field(default=None, validation_alias="INPUT_LOGDIRECTORY")
    export_directory: Optional[str] = Field(default=None, validation_alias="INPUT_EXPORTDIRECTORY")
    enable_verbose: bool = Field(default=False, validation_alias="INPUT_ENABLEVERBOSE")
    update_only: bool = Field(default=True, validation_alias="INPUT_UPDATEONLY")

    # Agent variables
    sources_directory: Optional[str] = Field(default=None, validation_alias="BUILD_SOURCESDIRECTORY")
    artifact_staging_directory: Optional[str] = Field(
        default=None, validation_alias="BUILD_ARTIFACTSTAGINGDIRECTORY"
    )
    system_debug: bool = Field(default=False, validation_alias="SYSTEM_DEBUG")

    # Release source
    github_token: Optional[str] = Field(default=None, validation_alias="GITHUB_TOKEN")
    release_api_url: str = Field(default=DEPENDENCY_CHECK_RELEASE_API, validation_alias="DC_RELEASE_API_URL")

    # Component configs
    http: HttpConfig = Field(default_factory=HttpConfig)
    runner: RunnerConfig = Field(default_factory=RunnerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_nested_delimiter = "__"
        env_ignore_empty = True
        populate_by_name = True
        extra = "ignore"  # Ignore extra fields from environment

    @validator(
        'custom_repo_url', 'local_install_path', 'log_directory', 'export_directory',
        'sources_directory', 'artifact_staging_directory', 'github_token',
        pre=True
    )
    def strip_input(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @validator('dependency_check_version', pre=True)
    def default_version(cls, v):
        if isinstance(v, str):
            v = v.strip()
        return v or DEPENDENCY_CHECK_VERSION_LATEST

    def _unset_if_sources(self, value: Optional[str]) -> Optional[Path]:
        """Map the agent's 'unset path' sentinel (the sources directory) to None."""
        if not value:
            return None
        if self.sources_directory and _same_path(value, self.sources_directory):
            return None
        return Path(value)

    def to_install_request(self) -> InstallRequest:
        """Build the per-run install request from the host inputs."""
        return InstallRequest(
            requested_version=self.dependency_check_version,
            custom_source_url=self.custom_repo_url,
            local_install_path=self._unset_if_sources(self.local_install_path),
            export_directory=self._unset_if_sources(self.export_directory),
            log_directory=self._unset_if_sources(self.log_directory),
            verbose=self.enable_verbose,
            update_only=self.update_only,
        )

    def default_output_directory(self, working_dir: Path) -> Path:
        """Directory used for unset log/export paths."""
        root = Path(self.artifact_staging_directory) if self.artifact_staging_directory else Path(working_dir)
        return root / DEPENDENCY_CHECK_FOLDER_NAME


def _same_path(a: str, b: str) -> bool:
    return Path(a).expanduser().resolve() == Path(b).expanduser().resolve()
