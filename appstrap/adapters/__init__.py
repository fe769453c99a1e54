"""Adapters — bindings for the external tools the installer drives.

Public re-exports for convenient access.
"""

from appstrap.adapters.mock import MockProcessRunner
from appstrap.adapters.shell.command import ProcessResult, ProcessRunner
from appstrap.adapters.vcs.git import GitRepository

__all__ = [
    "GitRepository",
    "MockProcessRunner",
    "ProcessResult",
    "ProcessRunner",
]
