"""
Errors raised by the Dependency Check data task.
"""


class DependencyCheckDataError(Exception):
    """Base class for task errors."""


class InvalidVersionError(DependencyCheckDataError):
    """Requested version is neither 'latest' nor x.y.z."""


class ReleaseResolutionError(DependencyCheckDataError):
    """Release metadata could not be fetched or parsed."""


class ReleaseAssetNotFoundError(ReleaseResolutionError):
    """The release, or a ZIP asset in it, does not exist."""


class ExtractionError(DependencyCheckDataError):
    """The downloaded archive could not be extracted."""


class MissingExecutableError(DependencyCheckDataError):
    """Installation directory or launcher script is missing."""


class ToolExecutionError(DependencyCheckDataError):
    """Dependency Check could not be run."""
