"""Package management for aspectweave.

This module handles downloading, caching, and locating the weaving compiler.
"""

from .cache import Cache
from .downloader import ChecksumError, DownloadError, PackageDownloader
from .weaver_toolchain import WeaverToolchain, WeaverToolchainError

__all__ = [
    "Cache",
    "PackageDownloader",
    "DownloadError",
    "ChecksumError",
    "WeaverToolchain",
    "WeaverToolchainError",
]
