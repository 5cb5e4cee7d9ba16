"""Pinned scanner versions.

Reads tool versions from pyproject.toml [tool.nucleirunner.tools].
This is the single source of truth for the nuclei release we provision.
"""

from __future__ import annotations

import sys
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from nucleirunner.core.logging import get_logger

LOGGER = get_logger(__name__)

# Hardcoded fallback versions (kept in sync with pyproject.toml)
# These are used if pyproject.toml cannot be read at runtime
_FALLBACK_VERSIONS: Dict[str, str] = {
    "nuclei": "3.3.9",
}


@lru_cache(maxsize=1)
def _load_pyproject_versions() -> Dict[str, str]:
    """Load tool versions from nuclei-runner's pyproject.toml.

    Returns:
        Dictionary mapping tool names to versions.
    """
    # Structure: src/nucleirunner/bootstrap/versions.py -> ../../../pyproject.toml
    pyproject_path = Path(__file__).parent.parent.parent.parent / "pyproject.toml"

    if not pyproject_path.exists():
        # Installed package - pyproject.toml not available
        return _FALLBACK_VERSIONS.copy()

    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        LOGGER.debug(f"Could not read {pyproject_path}: {e}")
        return _FALLBACK_VERSIONS.copy()

    versions = _FALLBACK_VERSIONS.copy()
    tools_section = data.get("tool", {}).get("nucleirunner", {}).get("tools", {})
    versions.update({name: str(version) for name, version in tools_section.items()})
    return versions


def get_tool_version(tool_name: str, default: Optional[str] = None) -> str:
    """Get the version for a specific tool.

    Args:
        tool_name: Name of the tool (e.g., 'nuclei').
        default: Optional default version if tool not found.

    Returns:
        Version string for the tool.

    Raises:
        KeyError: If tool not found and no default provided.
    """
    versions = _load_pyproject_versions()

    if tool_name in versions:
        return versions[tool_name]

    if default is not None:
        return default

    raise KeyError(f"Unknown tool: {tool_name}. Available: {list(versions.keys())}")


def get_all_versions() -> Dict[str, str]:
    """Get all tool versions."""
    return _load_pyproject_versions().copy()
