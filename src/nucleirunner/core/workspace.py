"""Working directory handles.

A WorkingDirectory tells the orchestrator where an execution's artifacts
live. Files are only ever written on the host that runs the scan: a
remote directory is handed to the agent over its channel, and the agent
works on it as a LocalWorkingDirectory.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:
    from nucleirunner.remote.channel import RemoteChannel


class WorkingDirectory(ABC):
    """Filesystem root for the artifacts of one execution."""

    @property
    @abstractmethod
    def path(self) -> str:
        """Absolute path of the directory on the host that owns it."""

    @abstractmethod
    def resolve(self, name: str) -> str:
        """Return the absolute path of `name` inside this directory."""

    def is_remote(self) -> bool:
        return False

    def remote_channel(self) -> Optional["RemoteChannel"]:
        return None


class LocalWorkingDirectory(WorkingDirectory):
    """A directory on the local filesystem."""

    def __init__(self, root: Union[str, Path]) -> None:
        self._root = Path(root).resolve()

    @property
    def root(self) -> Path:
        return self._root

    @property
    def path(self) -> str:
        return str(self._root)

    def resolve(self, name: str) -> str:
        return str(self._root / name)

    def write_text(self, path: str, content: str) -> None:
        """Write UTF-8 text to `path`, replacing any existing file.

        Raises:
            OSError: If the file cannot be written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")

    def __repr__(self) -> str:
        return f"LocalWorkingDirectory({self.path!r})"


class RemoteWorkingDirectory(WorkingDirectory):
    """A directory on a remote agent, reached through a channel.

    Paths are POSIX paths on the agent host.
    """

    def __init__(self, path: str, channel: Optional["RemoteChannel"]) -> None:
        self._path = str(PurePosixPath(path))
        self._channel = channel

    @property
    def path(self) -> str:
        return self._path

    def resolve(self, name: str) -> str:
        return str(PurePosixPath(self._path) / name)

    def is_remote(self) -> bool:
        return True

    def remote_channel(self) -> Optional["RemoteChannel"]:
        return self._channel

    def __repr__(self) -> str:
        return f"RemoteWorkingDirectory({self._path!r}, channel={self._channel!r})"
