"""
Bootstrap module for nuclei binary and template management.

This module handles:
- Platform resolution (OS + architecture)
- Working directory layout
- Binary download, verification and installation
- Template refresh

The provisioners live in their own modules and are imported explicitly.
"""

from nucleirunner.bootstrap.platform import Platform, resolve_platform, host_identity
from nucleirunner.bootstrap.paths import get_nuclei_runner_home, WorkspacePaths
from nucleirunner.bootstrap.validation import validate_tool, ToolStatus

__all__ = [
    "Platform",
    "resolve_platform",
    "host_identity",
    "get_nuclei_runner_home",
    "WorkspacePaths",
    "validate_tool",
    "ToolStatus",
]
