"""
Release lookup for the Dependency Check installer.
"""

from .release_resolver import ReleaseResolver, validate_format

__all__ = ["ReleaseResolver", "validate_format"]
