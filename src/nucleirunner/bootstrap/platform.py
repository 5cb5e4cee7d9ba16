"""Platform detection for nuclei release selection.

Maps raw OS and architecture strings to the platform names used by
nuclei release assets. The raw strings are always passed in explicitly;
only host_identity() reads them from the running interpreter.
"""

from __future__ import annotations

import platform
from enum import Enum
from typing import Optional, Tuple

from nucleirunner.core.errors import UnsupportedPlatformError

# Architecture normalization map
_ARCH_MAP = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "x64": "amd64",
    "arm64": "arm64",
    "aarch64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "386": "386",
}


class Platform(str, Enum):
    """Platforms with a published nuclei release."""

    LINUX_AMD64 = "linux-amd64"
    LINUX_ARM64 = "linux-arm64"
    LINUX_386 = "linux-386"
    DARWIN_AMD64 = "darwin-amd64"
    DARWIN_ARM64 = "darwin-arm64"
    WINDOWS_AMD64 = "windows-amd64"
    WINDOWS_386 = "windows-386"

    @property
    def os(self) -> str:
        return self.value.split("-", 1)[0]

    @property
    def arch(self) -> str:
        return self.value.split("-", 1)[1]

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    @property
    def release_os(self) -> str:
        """OS name as it appears in release asset names."""
        return "macOS" if self.os == "darwin" else self.os

    @property
    def archive_extension(self) -> str:
        return ".zip"

    @property
    def binary_name(self) -> str:
        return "nuclei.exe" if self.is_windows else "nuclei"


def normalize_os(os_name: str) -> Optional[str]:
    """Normalize an OS name to darwin, linux or windows.

    Accepts platform.system() values as well as JVM-style names such as
    "Mac OS X" or "Windows 10".
    """
    name = os_name.strip().lower()
    if name == "linux":
        return "linux"
    if name in ("darwin", "mac os x", "macos", "osx"):
        return "darwin"
    if name.startswith("windows"):
        return "windows"
    return None


def normalize_arch(machine: str) -> Optional[str]:
    """Normalize architecture string to standard form.

    Args:
        machine: Raw architecture string from platform.machine()

    Returns:
        Normalized architecture string or None if unknown.
    """
    return _ARCH_MAP.get(machine.strip().lower())


def resolve_platform(os_name: str, machine: str) -> Platform:
    """Resolve raw OS and architecture strings to a Platform.

    Args:
        os_name: Raw OS name (e.g. "Linux", "Darwin", "Windows 10").
        machine: Raw machine string (e.g. "x86_64", "aarch64").

    Returns:
        The matching Platform.

    Raises:
        UnsupportedPlatformError: If no nuclei release exists for the pair.
    """
    os_key = normalize_os(os_name or "")
    if os_key is None:
        raise UnsupportedPlatformError(f"Unsupported operating system: {os_name!r}")

    arch_key = normalize_arch(machine or "")
    if arch_key is None:
        raise UnsupportedPlatformError(f"Unsupported architecture: {machine!r}")

    try:
        return Platform(f"{os_key}-{arch_key}")
    except ValueError:
        raise UnsupportedPlatformError(
            f"Unsupported platform: {os_name!r} on {machine!r}. "
            f"Supported: {', '.join(p.value for p in Platform)}"
        ) from None


def host_identity() -> Tuple[str, str]:
    """Return the raw (os_name, machine) pair of the running interpreter."""
    return platform.system(), platform.machine()
