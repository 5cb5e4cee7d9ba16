"""Typed configuration for nuclei-runner."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from nucleirunner.bootstrap.versions import get_tool_version
from nucleirunner.remote.ssh import DEFAULT_AGENT_COMMAND


@dataclass
class RemoteConfig:
    """Remote agent settings. Remote execution is used when `host` is set."""

    host: Optional[str] = None
    user: Optional[str] = None
    port: int = 22
    key_path: Optional[str] = None
    workdir: Optional[str] = None
    agent_command: str = DEFAULT_AGENT_COMMAND
    strict_host_key: bool = True

    @property
    def enabled(self) -> bool:
        return bool(self.host)


@dataclass
class RunnerConfig:
    """Complete nuclei-runner configuration.

    Attributes:
        target: URL to scan.
        extra_flags: Whitespace-delimited extra nuclei flags.
        reporting_config: Issue tracker configuration text (YAML).
        nuclei_version: Pinned nuclei version.
        verify_checksums: Verify release archive checksums.
        workdir: Local working directory (defaults to the current directory).
        remote: Remote agent settings.
    """

    target: Optional[str] = None
    extra_flags: Optional[str] = None
    reporting_config: Optional[str] = None
    nuclei_version: str = field(default_factory=lambda: get_tool_version("nuclei"))
    verify_checksums: bool = True
    workdir: Optional[str] = None
    remote: RemoteConfig = field(default_factory=RemoteConfig)

    # Where the configuration was loaded from (for status/debug output)
    _config_sources: List[str] = field(default_factory=list, repr=False)

    @property
    def sources(self) -> List[str]:
        return list(self._config_sources)
