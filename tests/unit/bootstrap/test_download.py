"""Tests for secure download utilities."""

from __future__ import annotations

import io
import ssl
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from nucleirunner.bootstrap.download import (
    download_file,
    download_text,
    get_ssl_context,
    secure_urlopen,
)


def _response(data: bytes) -> MagicMock:
    response = MagicMock()
    stream = io.BytesIO(data)
    response.__enter__.return_value = stream
    response.__exit__.return_value = False
    return response


class TestSecureUrlopen:
    """Tests for secure_urlopen."""

    def test_rejects_plain_http(self) -> None:
        with pytest.raises(ValueError, match="Only HTTPS"):
            secure_urlopen("http://example.com/nuclei.zip")

    def test_uses_certifi_context(self) -> None:
        with patch("nucleirunner.bootstrap.download.urlopen") as mock_urlopen:
            secure_urlopen("https://example.com/x", timeout=5)
        _, kwargs = mock_urlopen.call_args
        assert kwargs["timeout"] == 5
        assert isinstance(kwargs["context"], ssl.SSLContext)

    def test_ssl_context_verifies(self) -> None:
        context = get_ssl_context()
        assert context.verify_mode == ssl.CERT_REQUIRED


class TestDownloadFile:
    """Tests for download_file."""

    def test_writes_response_to_disk(self, tmp_path: Path) -> None:
        dest = tmp_path / "archive.zip"
        with patch(
            "nucleirunner.bootstrap.download.secure_urlopen",
            return_value=_response(b"payload"),
        ):
            download_file("https://example.com/archive.zip", dest)
        assert dest.read_bytes() == b"payload"


class TestDownloadText:
    """Tests for download_text."""

    def test_decodes_utf8(self) -> None:
        with patch(
            "nucleirunner.bootstrap.download.secure_urlopen",
            return_value=_response("abc  file.zip\n".encode("utf-8")),
        ):
            assert download_text("https://example.com/sums.txt") == "abc  file.zip\n"
