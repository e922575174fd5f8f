"""
Downloads, installs and refreshes the OWASP Dependency Check vulnerability data
as a pipeline task.
"""

__version__ = "1.0.0"
