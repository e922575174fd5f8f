"""
Orchestrator - downloads, installs and refreshes the Dependency Check data.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

from ..analyzers.release_resolver import ReleaseResolver, validate_format
from ..errors import InvalidVersionError, MissingExecutableError
from ..models.install import InstallRequest
from ..models.options import ExecutionOptions
from ..models.result import RunResult
from .archive_installer import ArchiveInstaller, KEEP_DATA_PATTERNS
from .downloader import Downloader
from .tool_runner import ToolRunner


DEPENDENCY_CHECK_FOLDER_NAME = "dependency-check"


class InstallationOrchestrator:
    """Sequences resolve, download, extract and update for a single run."""

    def __init__(self,
                 request: InstallRequest,
                 working_dir: Path,
                 default_output_dir: Path,
                 resolver: ReleaseResolver,
                 downloader: Downloader,
                 installer: ArchiveInstaller,
                 runner: ToolRunner):
        """
        Initialize the orchestrator.

        Args:
            request: Task inputs for this run
            working_dir: Directory the installer is downloaded and extracted into
            default_output_dir: Used for unset log and export directories
            resolver: Release URL resolver
            downloader: Archive downloader
            installer: Archive extractor / directory cleaner
            runner: Dependency Check runner
        """
        self.logger = logging.getLogger(__name__)
        self.request = request
        self.working_dir = Path(working_dir)
        self.default_output_dir = Path(default_output_dir)
        self.resolver = resolver
        self.downloader = downloader
        self.installer = installer
        self.runner = runner

    @classmethod
    def from_settings(cls, settings, working_dir: Path, host=None) -> "InstallationOrchestrator":
        """Wire the default components from task settings."""
        request = settings.to_install_request()
        return cls(
            request=request,
            working_dir=working_dir,
            default_output_dir=settings.default_output_directory(working_dir),
            resolver=ReleaseResolver(
                release_api_url=settings.release_api_url,
                custom_source_url=request.custom_source_url,
                github_token=settings.github_token,
                timeout=settings.http.timeout_seconds,
                user_agent=settings.http.user_agent
            ),
            downloader=Downloader(
                working_dir=working_dir,
                retries=settings.http.download_retries,
                timeout=settings.http.timeout_seconds,
                user_agent=settings.http.user_agent
            ),
            installer=ArchiveInstaller(),
            runner=ToolRunner(
                host=host,
                java_opts=settings.runner.java_opts,
                timeout=settings.runner.update_timeout_seconds
            )
        )

    @property
    def default_install_dir(self) -> Path:
        return self.working_dir / DEPENDENCY_CHECK_FOLDER_NAME

    async def run(self) -> RunResult:
        """
        Execute the task. Never raises; failures are reported in the result.

        Returns:
            RunResult for this run
        """
        self.logger.info("Starting Dependency Check download...")
        result = RunResult(requested_version=self.request.requested_version)

        try:
            options = self._prepare_directories()

            if not validate_format(self.request.requested_version):
                raise InvalidVersionError(
                    f"Invalid Dependency Check version format '{self.request.requested_version}'."
                )

            if not self.request.has_local_installation:
                await self._install_and_update(options, result)
            else:
                self._check_local_installation(result)

            result.complete(True)
        except Exception as e:
            self.logger.error(str(e))
            self.logger.debug("Run failed", exc_info=True)
            result.complete(False, error=str(e) or e.__class__.__name__)

        self.logger.info("Ending Dependency Check download...")
        return result

    def _prepare_directories(self) -> ExecutionOptions:
        options = ExecutionOptions.from_request(self.request, self.default_output_dir)

        log_dir = options.log_file_path.parent
        self.logger.info(f"Setting log directory to {log_dir}")
        self._ensure_directory(log_dir, "log")

        self.logger.info(f"Setting export directory to {options.export_directory}")
        self._ensure_directory(options.export_directory, "export")

        return options

    def _ensure_directory(self, path: Path, kind: str) -> None:
        if not path.exists():
            self.logger.info(f"Creating {kind} directory at {path}")
            path.mkdir(parents=True, exist_ok=True)

    async def _install_and_update(self, options: ExecutionOptions, result: RunResult) -> None:
        install_dir = self.default_install_dir
        install_dir.mkdir(parents=True, exist_ok=True)
        result.install_path = str(install_dir)

        location = await asyncio.to_thread(
            self.resolver.resolve_download_url, self.request.requested_version
        )
        result.download_url = location.download_url

        self.installer.prune_directory(install_dir, KEEP_DATA_PATTERNS)

        artifact = await asyncio.to_thread(self.downloader.download, location.download_url)
        await asyncio.to_thread(self.installer.install, artifact, self.working_dir)

        if self.request.update_only:
            script_path = self.runner.locate_script(install_dir)
            result.tool_exit_code = await self.runner.run_update(
                script_path, options, has_local_installation=False
            )

    def _check_local_installation(self, result: RunResult) -> None:
        install_dir: Optional[Path] = self.request.local_install_path
        if install_dir is None or not install_dir.exists():
            raise MissingExecutableError(f"Not found Dependency Check installer: {install_dir}")
        self.logger.info(f"Using local Dependency Check installation at {install_dir}")
        result.install_path = str(install_dir)
