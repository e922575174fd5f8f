#!/usr/bin/env python3
"""
Main entry point for the Dependency Check data task.
"""

import asyncio
import argparse
import logging
import sys
from pathlib import Path
import json
from dotenv import load_dotenv

from config.settings import Settings
from dependency_check_data.core.orchestrator import InstallationOrchestrator
from dependency_check_data.integrations.pipeline_host import PipelineHost, MockPipelineHost
from dependency_check_data.models.result import TaskResult
from dependency_check_data.utils.logging import setup_root_logger


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Download, install and update OWASP Dependency Check data"
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file (JSON format) overriding environment inputs"
    )

    parser.add_argument(
        "--working-dir",
        type=Path,
        default=Path.cwd(),
        help="Directory the installer is downloaded and extracted into (default: current directory)"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO, DEBUG when SYSTEM_DEBUG=true)"
    )

    parser.add_argument(
        "--log-file",
        type=Path,
        help="Also write logs to this rotating file"
    )

    parser.add_argument(
        "--mock-host",
        action="store_true",
        help="Do not emit pipeline logging commands"
    )

    return parser.parse_args(argv)


def load_config(args) -> Settings:
    """Load settings from the environment, overridden by an optional JSON file."""
    if args.config and args.config.exists():
        with open(args.config) as f:
            config_data = json.load(f)
        settings = Settings(**config_data)
    else:
        settings = Settings()

    if args.log_level:
        settings.logging.level = args.log_level
    if args.log_file:
        settings.logging.file_path = args.log_file

    return settings


async def run(args) -> int:
    """Run the task and report the result to the host. Returns the exit code."""
    host = MockPipelineHost() if args.mock_host else PipelineHost()
    logger = logging.getLogger(__name__)

    try:
        settings = load_config(args)
        setup_root_logger(
            settings.logging.file_path,
            settings.logging.level,
            format_string=settings.logging.format,
            debug=settings.system_debug,
            max_file_size_mb=settings.logging.max_file_size_mb,
            backup_count=settings.logging.backup_count
        )

        orchestrator = InstallationOrchestrator.from_settings(
            settings, working_dir=args.working_dir.resolve(), host=host
        )
        result = await orchestrator.run()
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        host.set_result(TaskResult.FAILED, str(e))
        return 1

    logger.debug(f"Run result: {result.model_dump_json()}")

    host.set_result(result.task_result, result.error or "")
    return 0 if result.success else 1


def main(argv=None):
    """Console script entry point."""
    # Load environment variables from .env file
    load_dotenv()

    args = parse_arguments(argv)
    setup_root_logger()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
