"""Nuclei binary provisioning.

Downloads the pinned nuclei release for a platform into a working
directory, verifies its checksum and installs the binary atomically.
An already installed binary of the same version is reused without any
network access.
"""

from __future__ import annotations

import hashlib
import os
import shutil
import tarfile
import tempfile
import zipfile
from pathlib import Path, PurePosixPath
from typing import Callable, Dict, List
from urllib.error import URLError

from nucleirunner.bootstrap.download import download_file, download_text
from nucleirunner.bootstrap.paths import WorkspacePaths
from nucleirunner.bootstrap.platform import Platform
from nucleirunner.bootstrap.validation import ToolStatus, validate_tool
from nucleirunner.bootstrap.versions import get_tool_version
from nucleirunner.core.errors import ProvisioningError
from nucleirunner.core.logging import get_logger
from nucleirunner.core.models import BinaryHandle
from nucleirunner.core.workspace import LocalWorkingDirectory

LOGGER = get_logger(__name__)

TOOL_NAME = "nuclei"

# Default version from pyproject.toml [tool.nucleirunner.tools]
DEFAULT_VERSION = get_tool_version(TOOL_NAME)

RELEASE_BASE_URL = "https://github.com/projectdiscovery/nuclei/releases/download"


def archive_name(version: str, platform: Platform) -> str:
    """Release asset name, e.g. nuclei_3.3.9_linux_amd64.zip."""
    return f"nuclei_{version}_{platform.release_os}_{platform.arch}{platform.archive_extension}"


def archive_url(version: str, platform: Platform) -> str:
    return f"{RELEASE_BASE_URL}/v{version}/{archive_name(version, platform)}"


def checksums_url(version: str) -> str:
    return f"{RELEASE_BASE_URL}/v{version}/nuclei_{version}_checksums.txt"


def sha256_file(path: Path) -> str:
    digest = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(65536), b""):
            digest.update(chunk)
    return digest.hexdigest()


def parse_checksums(text: str) -> Dict[str, str]:
    """Parse a `sha256sum`-style file into {filename: hexdigest}."""
    checksums: Dict[str, str] = {}
    for raw_line in text.splitlines():
        parts = raw_line.split()
        if len(parts) == 2:
            digest, name = parts
            checksums[name.lstrip("*")] = digest.lower()
    return checksums


class BinaryProvisioner:
    """Ensures a working directory contains an executable nuclei binary.

    Binary layout:
    - Installed at {workdir}/.nuclei-runner/bin/nuclei/{version}/nuclei
    - Staged under {workdir}/.nuclei-runner/tmp/ while downloading

    One execution per working directory at a time is assumed; concurrent
    provisioning of the same directory is not coordinated.
    """

    def __init__(
        self,
        version: str = DEFAULT_VERSION,
        verify_checksums: bool = True,
        downloader: Callable[[str, Path], None] = download_file,
        text_fetcher: Callable[[str], str] = download_text,
    ) -> None:
        self._version = version
        self._verify_checksums = verify_checksums
        self._download = downloader
        self._fetch_text = text_fetcher

    @property
    def version(self) -> str:
        return self._version

    def binary_path(self, working_dir: LocalWorkingDirectory, platform: Platform) -> Path:
        """Expected location of the binary inside `working_dir`."""
        paths = WorkspacePaths(working_dir.root)
        return paths.tool_bin_dir(TOOL_NAME, self._version) / platform.binary_name

    def ensure(self, working_dir: LocalWorkingDirectory, platform: Platform) -> BinaryHandle:
        """Return a handle to the binary, downloading it if needed.

        Args:
            working_dir: Local working directory to provision into.
            platform: Platform whose release should be installed.

        Returns:
            BinaryHandle for the installed binary.

        Raises:
            ProvisioningError: On network, checksum, archive or filesystem failure.
        """
        binary_path = self.binary_path(working_dir, platform)
        handle = BinaryHandle(path=str(binary_path), platform=platform, version=self._version)

        status = validate_tool(binary_path)
        if status == ToolStatus.PRESENT:
            LOGGER.debug(f"Nuclei binary found at {binary_path}")
            return handle
        if status == ToolStatus.NOT_EXECUTABLE:
            LOGGER.warning(f"Nuclei binary at {binary_path} is not executable, reinstalling")

        LOGGER.info(f"Downloading nuclei v{self._version} for {platform.value}...")
        try:
            self._install(binary_path, platform, WorkspacePaths(working_dir.root).tmp_dir)
        except ProvisioningError:
            raise
        except (OSError, URLError, ValueError, zipfile.BadZipFile, tarfile.TarError) as e:
            raise ProvisioningError(
                f"Failed to provision nuclei v{self._version} for {platform.value}: {e}"
            ) from e

        LOGGER.info(f"Nuclei v{self._version} installed to {binary_path}")
        return handle

    def _install(self, binary_path: Path, platform: Platform, staging_root: Path) -> None:
        staging_root.mkdir(parents=True, exist_ok=True)
        staging_dir = Path(tempfile.mkdtemp(prefix="nuclei-", dir=staging_root))
        try:
            archive_path = staging_dir / archive_name(self._version, platform)
            url = archive_url(self._version, platform)
            LOGGER.debug(f"Downloading from {url}")
            self._download(url, archive_path)

            if self._verify_checksums:
                self._verify(archive_path, platform)

            extracted = _extract_binary(archive_path, platform.binary_name, staging_dir / "extract")
            if not platform.is_windows:
                extracted.chmod(0o755)

            binary_path.parent.mkdir(parents=True, exist_ok=True)
            os.replace(extracted, binary_path)
        finally:
            shutil.rmtree(staging_dir, ignore_errors=True)

    def _verify(self, archive_path: Path, platform: Platform) -> None:
        name = archive_name(self._version, platform)
        checksums = parse_checksums(self._fetch_text(checksums_url(self._version)))
        expected = checksums.get(name)
        if expected is None:
            raise ProvisioningError(f"No checksum published for {name}")
        actual = sha256_file(archive_path)
        if actual != expected:
            raise ProvisioningError(
                f"Checksum mismatch for {name}: expected {expected}, got {actual}"
            )
        LOGGER.debug(f"Checksum verified for {name}")


def _extract_binary(archive_path: Path, binary_name: str, dest_dir: Path) -> Path:
    """Extract the single binary member of a release archive.

    Only a member whose base name equals `binary_name` is extracted; other
    members (README, LICENSE) are ignored.

    Raises:
        ProvisioningError: If the archive holds no such binary.
        ValueError: If a member name would escape `dest_dir`.
    """
    dest_dir.mkdir(parents=True, exist_ok=True)
    dest_path = dest_dir / binary_name

    if archive_path.name.endswith(".zip"):
        with zipfile.ZipFile(archive_path, "r") as zf:
            member = _find_member(zf.namelist(), binary_name)
            with zf.open(member) as src, open(dest_path, "wb") as out:
                shutil.copyfileobj(src, out)
    else:
        with tarfile.open(archive_path, "r:*") as tar:
            names = [m.name for m in tar.getmembers() if m.isfile()]
            member = _find_member(names, binary_name)
            src = tar.extractfile(member)
            if src is None:
                raise ProvisioningError(f"Cannot read {member} from {archive_path.name}")
            with src, open(dest_path, "wb") as out:
                shutil.copyfileobj(src, out)

    return dest_path


def _find_member(names: List[str], binary_name: str) -> str:
    for name in names:
        member_path = PurePosixPath(name)
        if member_path.is_absolute() or ".." in member_path.parts:
            raise ValueError(f"Path traversal detected: {name}")
        if member_path.name == binary_name:
            return name
    raise ProvisioningError(f"Archive does not contain {binary_name}")
