"""Shared fixtures for nuclei-runner tests."""

from __future__ import annotations

import hashlib
import io
import logging
import sys
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

import pytest

from nucleirunner.bootstrap.platform import Platform
from nucleirunner.bootstrap.provisioner import archive_name, archive_url, checksums_url
from nucleirunner.core import logging as runner_logging
from nucleirunner.core.streaming import CallbackLogSink

FAKE_VERSION = "9.9.9"

# A stand-in nuclei: records its argv, fails template updates unless told
# otherwise, and exits with FAKE_NUCLEI_SCAN_EXIT for scans.
FAKE_NUCLEI_SOURCE = """\
import json
import os
import sys

log_path = os.environ.get("FAKE_NUCLEI_LOG")
if log_path:
    with open(log_path, "a", encoding="utf-8") as log:
        log.write(json.dumps(sys.argv[1:]) + "\\n")

if "-update-templates" in sys.argv:
    print("updating templates")
    sys.exit(int(os.environ.get("FAKE_NUCLEI_UPDATE_EXIT", "1")))

print("scan started")
print("progress on stderr", file=sys.stderr)
print("scan finished")
sys.exit(int(os.environ.get("FAKE_NUCLEI_SCAN_EXIT", "0")))
"""


@pytest.fixture(autouse=True)
def reset_package_logging():
    """Drop the handler the CLI installs so it never outlives captured streams."""
    yield
    logger = logging.getLogger(runner_logging.PACKAGE_LOGGER)
    if runner_logging._handler is not None:
        logger.removeHandler(runner_logging._handler)
        runner_logging._handler = None
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def log_lines() -> List[str]:
    return []


@pytest.fixture
def log_sink(log_lines: List[str]) -> CallbackLogSink:
    """A log sink collecting lines into `log_lines`."""
    return CallbackLogSink(log_lines.append)


def build_zip(members: Dict[str, bytes]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, data in members.items():
            zf.writestr(name, data)
    return buffer.getvalue()


@dataclass
class FakeRelease:
    """Serves a fake nuclei release in place of GitHub downloads."""

    platform: Platform
    version: str
    archive: bytes
    checksum_override: str = ""
    downloads: List[str] = field(default_factory=list)

    @property
    def checksums_text(self) -> str:
        digest = self.checksum_override or hashlib.sha256(self.archive).hexdigest()
        name = archive_name(self.version, self.platform)
        return f"{'0' * 64}  nuclei_{self.version}_other_arch.zip\n{digest}  {name}\n"

    def download(self, url: str, dest: Path) -> None:
        self.downloads.append(url)
        assert url == archive_url(self.version, self.platform)
        dest.write_bytes(self.archive)

    def fetch_text(self, url: str) -> str:
        self.downloads.append(url)
        assert url == checksums_url(self.version)
        return self.checksums_text


@pytest.fixture
def fake_release() -> FakeRelease:
    """A linux-amd64 release whose binary is a Python script."""
    script = f"#!{sys.executable}\n{FAKE_NUCLEI_SOURCE}".encode("utf-8")
    archive = build_zip({
        "README.md": b"# nuclei",
        "LICENSE.md": b"MIT",
        "nuclei": script,
    })
    return FakeRelease(platform=Platform.LINUX_AMD64, version=FAKE_VERSION, archive=archive)


@pytest.fixture
def fake_nuclei_log(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """File the fake nuclei appends its argv to (one JSON list per run)."""
    log_path = tmp_path / "fake-nuclei-calls.jsonl"
    monkeypatch.setenv("FAKE_NUCLEI_LOG", str(log_path))
    return log_path


@pytest.fixture
def zip_builder():
    """Return a function building zip archive bytes from {name: data}."""
    return build_zip
