"""
Utility modules for the Dependency Check data task.
"""

from .logging import setup_root_logger, PipelineCommandFormatter

__all__ = ["setup_root_logger", "PipelineCommandFormatter"]
