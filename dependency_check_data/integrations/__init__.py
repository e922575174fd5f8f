"""
Integration modules for the pipeline host.
"""

from .pipeline_host import PipelineHost, MockPipelineHost

__all__ = ["PipelineHost", "MockPipelineHost"]
