"""Secure download utilities with SSL certificate handling.

Downloads always verify against certifi's CA bundle so that provisioning
works on build agents whose system certificate store Python cannot read.
"""

from __future__ import annotations

import shutil
import ssl
from pathlib import Path
from typing import Optional
from urllib.request import urlopen

import certifi


def get_ssl_context() -> ssl.SSLContext:
    """Get an SSL context that uses certifi's CA bundle."""
    return ssl.create_default_context(cafile=certifi.where())


def secure_urlopen(url: str, timeout: Optional[float] = 30.0):
    """Open a URL with proper SSL certificate verification.

    Args:
        url: The URL to open.
        timeout: Connection timeout in seconds.

    Returns:
        A file-like object for reading the response.

    Raises:
        URLError: If the URL cannot be opened.
        ValueError: If the URL is not HTTPS.
    """
    if not url.startswith("https://"):
        raise ValueError(f"Only HTTPS URLs are supported: {url}")

    ssl_context = get_ssl_context()
    return urlopen(url, timeout=timeout, context=ssl_context)  # nosec B310


def download_file(url: str, dest_path: Path, timeout: Optional[float] = 60.0) -> None:
    """Download a file from a URL with proper SSL certificate verification.

    The response is streamed to disk rather than read into memory.

    Raises:
        URLError: If the URL cannot be opened.
        ValueError: If the URL is not HTTPS.
        OSError: If the file cannot be written.
    """
    with secure_urlopen(url, timeout=timeout) as response, open(dest_path, "wb") as out:
        shutil.copyfileobj(response, out)


def download_text(url: str, timeout: Optional[float] = 30.0) -> str:
    """Download a small UTF-8 text resource (e.g. a checksums file)."""
    with secure_urlopen(url, timeout=timeout) as response:
        return response.read().decode("utf-8")
