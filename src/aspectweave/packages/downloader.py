"""Weaver jar downloader.

Streams a jar from a Maven repository into place, verifying that what
arrived is a jar and, when a checksum is known, that it is the right one.
A partial or rejected download never replaces the destination.
"""

import hashlib
from pathlib import Path
from typing import BinaryIO, Optional
from urllib.parse import urlparse

import requests
from tqdm import tqdm

# Local file header signature of a zip archive
JAR_MAGIC = b"PK\x03\x04"


class DownloadError(Exception):
    """Raised when download fails."""

    pass


class ChecksumError(Exception):
    """Raised when checksum verification fails."""

    pass


class PackageDownloader:
    """Downloads jars with progress tracking."""

    def __init__(self, chunk_size: int = 8192, timeout: int = 30):
        """Initialize downloader.

        Args:
            chunk_size: Size of chunks for downloading and hashing
            timeout: Connect/read timeout in seconds
        """
        self.chunk_size = chunk_size
        self.timeout = timeout

    def download(
        self,
        url: str,
        dest_path: Path,
        checksum: Optional[str] = None,
        show_progress: bool = True,
    ) -> Path:
        """Download a jar from a URL.

        The body is written next to the destination as ``<name>.tmp`` and
        renamed over it only once every check has passed.

        Args:
            url: URL to download from
            dest_path: Destination file path
            checksum: Optional SHA256 checksum for verification
            show_progress: Whether to show progress bar

        Returns:
            Path to the downloaded file

        Raises:
            DownloadError: If the request fails or the body is not a jar
            ChecksumError: If checksum verification fails
        """
        dest_path = Path(dest_path)
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        temp_file = dest_path.with_name(dest_path.name + ".tmp")

        try:
            with requests.get(url, stream=True, timeout=self.timeout) as response:
                response.raise_for_status()
                total = int(response.headers.get("content-length", 0))
                with open(temp_file, "wb") as out:
                    digest = self._stream(response, out, url, total, show_progress)
        except requests.RequestException as e:
            temp_file.unlink(missing_ok=True)
            raise DownloadError(f"Failed to download {url}: {e}") from e

        try:
            self._check(temp_file, url, digest, checksum)
        except (DownloadError, ChecksumError):
            temp_file.unlink(missing_ok=True)
            raise

        temp_file.replace(dest_path)
        return dest_path

    def _stream(
        self,
        response: requests.Response,
        out: BinaryIO,
        url: str,
        total: int,
        show_progress: bool,
    ) -> str:
        sha256 = hashlib.sha256()
        with tqdm(
            total=total,
            unit="B",
            unit_scale=True,
            unit_divisor=1024,
            desc=f"Downloading {Path(urlparse(url).path).name}",
            disable=not show_progress or total == 0,
        ) as progress_bar:
            for chunk in response.iter_content(chunk_size=self.chunk_size):
                if not chunk:
                    continue
                out.write(chunk)
                sha256.update(chunk)
                progress_bar.update(len(chunk))
        return sha256.hexdigest()

    @staticmethod
    def _check(temp_file: Path, url: str, digest: str, checksum: Optional[str]) -> None:
        with open(temp_file, "rb") as f:
            if f.read(len(JAR_MAGIC)) != JAR_MAGIC:
                raise DownloadError(f"Downloaded file from {url} is not a jar")
        if checksum and digest.lower() != checksum.lower():
            raise ChecksumError(
                f"Checksum mismatch for {url}\nExpected: {checksum}\nGot: {digest}"
            )

    @staticmethod
    def verify_checksum(file_path: Path, expected: str, chunk_size: int = 8192) -> bool:
        """Verify the SHA256 checksum of a file already on disk."""
        sha256 = hashlib.sha256()
        with open(file_path, "rb") as f:
            for chunk in iter(lambda: f.read(chunk_size), b""):
                sha256.update(chunk)
        return sha256.hexdigest().lower() == expected.lower()
