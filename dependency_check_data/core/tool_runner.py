"""
Runner for the installed Dependency Check command line tool.
"""

import asyncio
import logging
import os
import platform
from pathlib import Path
from typing import Dict, List, Optional

from ..errors import MissingExecutableError, ToolExecutionError
from ..models.options import CliArgument, ExecutionOptions


JAVA_OPTS_VARIABLE = "JAVA_OPTS"
OUTPUT_CHUNK_SIZE = 64 * 1024


class ToolRunner:
    """Invokes Dependency Check in update-only mode."""

    def __init__(self,
                 host=None,
                 java_opts: str = "-Xss8192k",
                 timeout: Optional[int] = None,
                 is_windows: Optional[bool] = None):
        """
        Initialize the runner.

        Args:
            host: Pipeline host used to publish variables (optional)
            java_opts: JAVA_OPTS value exported to the tool
            timeout: Seconds before a run is terminated; None waits forever
            is_windows: Override platform detection
        """
        self.logger = logging.getLogger(__name__)
        self.host = host
        self.java_opts = java_opts
        self.timeout = timeout
        self.is_windows = platform.system() == "Windows" if is_windows is None else is_windows

    def script_name(self) -> str:
        return "dependency-check.bat" if self.is_windows else "dependency-check.sh"

    def locate_script(self, install_dir: Path) -> Path:
        """Return the OS specific launcher script under <install_dir>/bin."""
        script_path = Path(install_dir) / "bin" / self.script_name()
        self.logger.info(f"Dependency Check script set to {script_path}")

        if not script_path.exists():
            raise MissingExecutableError(f"Not found Dependency Check script: {script_path}")
        return script_path

    def remove_stale_locks(self, install_dir: Path) -> int:
        """
        Remove *.lock files left behind by a cancelled run.

        A per-agent installation never runs two scans at once, so any lock
        file still present is stale.

        Returns:
            Number of lock files removed
        """
        self.logger.info("Searching for left over lock files...")
        lock_files = sorted(p for p in Path(install_dir).rglob('*.lock') if p.is_file())

        if not lock_files:
            self.logger.info("found no left over lock files, continuing...")
            return 0

        self.logger.info(f"found {len(lock_files)} left over lock files, removing them now...")
        removed = 0
        for lock_file in lock_files:
            try:
                if lock_file.exists():
                    self.logger.info(f'removing lock file "{lock_file}"...')
                    lock_file.unlink()
                    removed += 1
                else:
                    self.logger.info(f'found lock file "{lock_file}" doesn\'t exist, that was unexpected')
            except OSError as e:
                self.logger.warning(f'could not delete lock file "{lock_file}": {e}')

        return removed

    async def run_update(self,
                         script_path: Path,
                         options: ExecutionOptions,
                         has_local_installation: bool = False) -> int:
        """
        Run the version smoke test, then the data update.

        Args:
            script_path: Launcher script
            options: Execution options
            has_local_installation: Skip lock file cleanup for shared installations

        Returns:
            Exit code of the update run
        """
        args = options.executable_arguments

        self.logger.info("Invoking Dependency Check data update...")
        self.logger.info(f"Path: {script_path}")
        self.logger.info(f"Arguments: {options.cli_argument_string}")

        env = self._build_env()

        smoke_code = await self._execute(script_path, [CliArgument.VERSION.value], env)
        if smoke_code != 0:
            raise ToolExecutionError(
                f"Dependency Check version check failed with exit code {smoke_code}"
            )

        if not has_local_installation:
            self.remove_stale_locks(Path(script_path).parent.parent)

        exit_code = await self._execute(script_path, args, env)
        self.logger.info(f"Dependency Check completed with exit code {exit_code}.")
        if exit_code != 0:
            self.logger.warning(f"Dependency Check data update returned non-zero exit code {exit_code}")
        return exit_code

    def _build_env(self) -> Dict[str, str]:
        env = dict(os.environ)
        env[JAVA_OPTS_VARIABLE] = self.java_opts
        if self.host is not None:
            self.host.set_variable(JAVA_OPTS_VARIABLE, self.java_opts)
        return env

    async def _execute(self, script_path: Path, args: List[str], env: Dict[str, str]) -> int:
        """Run the script, streaming its output into the log."""
        try:
            process = await asyncio.create_subprocess_exec(
                str(script_path), *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                env=env
            )
        except OSError as e:
            raise ToolExecutionError(f"Failed to start {script_path}: {e}") from e

        try:
            await asyncio.wait_for(self._stream_output(process), timeout=self.timeout)
            return await process.wait()
        except asyncio.TimeoutError:
            raise ToolExecutionError(f"Dependency Check timed out after {self.timeout} seconds")
        finally:
            if process.returncode is None:
                self.logger.debug(f"Terminating {script_path} (pid {process.pid})")
                try:
                    process.terminate()
                except ProcessLookupError:
                    pass
                await process.wait()

    async def _stream_output(self, process) -> None:
        # Lines may exceed the StreamReader limit, so split chunks here.
        pending = b""
        while True:
            chunk = await process.stdout.read(OUTPUT_CHUNK_SIZE)
            if not chunk:
                break
            *lines, pending = (pending + chunk).split(b"\n")
            for line in lines:
                self._log_output(line)
        if pending:
            self._log_output(pending)

    def _log_output(self, line: bytes) -> None:
        self.logger.info(line.decode(errors="replace").rstrip())
