"""Cache management for aspectweave tools.

This module provides the cache structure for downloaded weaver jars.

Cache Structure:
    .aspectweave/
    └── cache/
        └── tools/
            └── {url_hash}/         # SHA256 hash of base URL
                └── {version}/      # Version string
                    └── aspectjtools-{version}.jar

Hashing the base URL keeps jars from different mirrors apart, and the version
directory lets several weaver versions coexist.
"""

import hashlib
import os
from pathlib import Path
from typing import Optional


class Cache:
    """Manages the aspectweave cache directory structure.

    The cache can be located in the project directory (.aspectweave/) or in a
    global location specified by the ASPECTWEAVE_CACHE_DIR environment variable.
    """

    def __init__(self, project_dir: Optional[Path] = None):
        """Initialize cache manager.

        Args:
            project_dir: Project directory. If None, uses current directory.
        """
        if project_dir is None:
            project_dir = Path.cwd()

        self.project_dir = Path(project_dir).resolve()

        cache_env = os.environ.get("ASPECTWEAVE_CACHE_DIR")
        if cache_env:
            self.cache_root = Path(cache_env).resolve()
        else:
            self.cache_root = self.project_dir / ".aspectweave" / "cache"

    @staticmethod
    def hash_url(url: str) -> str:
        """Generate a SHA256 hash of a URL for cache directory naming.

        Args:
            url: The base URL to hash

        Returns:
            First 16 characters of SHA256 hash (sufficient for uniqueness)
        """
        return hashlib.sha256(url.encode("utf-8")).hexdigest()[:16]

    @property
    def tools_dir(self) -> Path:
        """Directory for downloaded weaver tools."""
        return self.cache_root / "tools"

    def get_tool_path(self, base_url: str, version: str) -> Path:
        """Get the cache directory for one tool version.

        Args:
            base_url: Base URL the tool is downloaded from
            version: Tool version string

        Returns:
            Path to the versioned tool directory
        """
        return self.tools_dir / self.hash_url(base_url) / version

    def ensure_directories(self) -> None:
        """Create the cache directories if they don't exist."""
        self.tools_dir.mkdir(parents=True, exist_ok=True)
