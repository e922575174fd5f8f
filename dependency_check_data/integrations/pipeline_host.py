"""
Azure Pipelines agent integration: logging commands for results and variables.
"""

import logging
import os
import sys
from typing import Dict, List, Optional, TextIO, Tuple

from ..models.result import TaskResult


def escape_data(value: str) -> str:
    """Escape a logging command message."""
    return (value.replace("%", "%AZP25")
                 .replace("\r", "%0D")
                 .replace("\n", "%0A"))


def escape_property(value: str) -> str:
    """Escape a logging command property value."""
    return escape_data(value).replace("]", "%5D").replace(";", "%3B")


def format_command(command: str, properties: Dict[str, str], message: str = "") -> str:
    props = "".join(f"{key}={escape_property(str(val))};" for key, val in properties.items())
    return f"##vso[{command} {props}]{escape_data(message)}"


class PipelineHost:
    """Reports task results and variables to the pipeline agent via stdout."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.logger = logging.getLogger(__name__)
        self.stream = stream or sys.stdout

    def _emit(self, line: str) -> None:
        self.stream.write(line + "\n")
        self.stream.flush()

    def set_result(self, result: TaskResult, message: str = "") -> None:
        """Complete the task with the given result."""
        self._emit(format_command(
            "task.complete", {"result": result.value, "done": "true"}, message
        ))

    def set_variable(self, name: str, value: str) -> None:
        """Set a pipeline variable and mirror it into this process' environment."""
        os.environ[name] = value
        self._emit(format_command("task.setvariable", {"variable": name}, value))


class MockPipelineHost:
    """Mock host for testing without a pipeline agent."""

    def __init__(self, *args, **kwargs):
        self.logger = logging.getLogger(__name__)
        self.logger.info("Using mock pipeline host")
        self.results: List[Tuple[TaskResult, str]] = []
        self.variables: Dict[str, str] = {}

    def set_result(self, result: TaskResult, message: str = "") -> None:
        self.logger.info(f"Task result: {result.value} {message}".rstrip())
        self.results.append((result, message))

    def set_variable(self, name: str, value: str) -> None:
        self.logger.info(f"Set variable {name}={value}")
        self.variables[name] = value

    @property
    def last_result(self) -> Optional[TaskResult]:
        return self.results[-1][0] if self.results else None
