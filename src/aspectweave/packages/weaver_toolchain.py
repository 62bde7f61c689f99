"""Weaver toolchain management.

This module locates (or downloads) the AspectJ tools jar and builds the
command prefix that launches its ajc entry point on a JVM.
"""

import logging
import shutil
from pathlib import Path
from typing import List, Optional

from .cache import Cache
from .downloader import ChecksumError, DownloadError, PackageDownloader

logger = logging.getLogger(__name__)


class WeaverToolchainError(Exception):
    """Raised when weaver toolchain operations fail."""

    pass


class WeaverToolchain:
    """Manages the aspectjtools jar used as the weaving compiler."""

    # Maven Central layout for org.aspectj:aspectjtools
    BASE_URL = "https://repo1.maven.org/maven2/org/aspectj/aspectjtools"

    MAIN_CLASS = "org.aspectj.tools.ajc.Main"

    def __init__(
        self,
        cache: Cache,
        version: str,
        java: str = "java",
        jar_path: Optional[Path] = None,
        checksum: Optional[str] = None,
        show_progress: bool = True,
    ):
        """Initialize weaver toolchain.

        Args:
            cache: Cache instance for storing the jar
            version: aspectjtools version (e.g., "1.9.22.1")
            java: Java launcher executable
            jar_path: Explicit aspectjtools jar, bypasses cache and download
            checksum: Optional SHA256 of the jar
            show_progress: Whether to show download progress
        """
        self.cache = cache
        self.version = version
        self.java = java
        self.jar_path = jar_path
        self.checksum = checksum
        self.show_progress = show_progress
        self.downloader = PackageDownloader()

    @property
    def jar_name(self) -> str:
        return f"aspectjtools-{self.version}.jar"

    @property
    def download_url(self) -> str:
        return f"{self.BASE_URL}/{self.version}/{self.jar_name}"

    @property
    def cached_jar(self) -> Path:
        return self.cache.get_tool_path(self.BASE_URL, self.version) / self.jar_name

    def is_installed(self) -> bool:
        """Check whether the weaver jar is available without downloading."""
        if self.jar_path is not None:
            return self.jar_path.is_file()
        return self.cached_jar.is_file()

    def ensure_weaver(self) -> Path:
        """Ensure the weaver jar is present.

        Returns:
            Path to the aspectjtools jar

        Raises:
            WeaverToolchainError: If the jar is missing or cannot be downloaded
        """
        if self.jar_path is not None:
            if not self.jar_path.is_file():
                raise WeaverToolchainError(f"Weaver jar not found: {self.jar_path}")
            return self.jar_path

        jar = self.cached_jar
        if jar.is_file():
            logger.debug(f"Using cached weaver: {jar}")
            return jar

        logger.info(f"Downloading AspectJ tools {self.version}...")
        try:
            self.downloader.download(
                self.download_url,
                jar,
                checksum=self.checksum,
                show_progress=self.show_progress,
            )
        except (DownloadError, ChecksumError) as e:
            raise WeaverToolchainError(str(e)) from e

        return jar

    def find_java(self) -> str:
        """Resolve the java launcher on PATH.

        Raises:
            WeaverToolchainError: If java cannot be found
        """
        java = shutil.which(self.java)
        if java is None:
            raise WeaverToolchainError(
                f"Java launcher '{self.java}' not found. Install a JDK or set java in aspectj.ini."
            )
        return java

    def get_command(self) -> List[str]:
        """Get the command prefix that runs ajc.

        Returns:
            Launcher argv, to be followed by ajc arguments
        """
        jar = self.ensure_weaver()
        return [self.find_java(), "-classpath", str(jar), self.MAIN_CLASS]
