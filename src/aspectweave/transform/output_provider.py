"""Content-addressed output locations for transform results.

Layout:
    {root}/
    ├── folders/
    │   └── {types_key}/{scopes_key}/{name}/       # Format.DIRECTORY
    └── jars/
        └── {types_key}/{scopes_key}/{name}.jar    # Format.JAR

The type and scope keys are hashes of the sorted enum values, so equal
(name, types, scopes, format) tuples always land on the same path and
different tuples never collide.
"""

import shutil
from pathlib import Path
from typing import Iterable

from ..packages.cache import Cache
from .artifacts import ContentType, Format, Scope


class OutputProvider:
    """Hands out output slots below a single root directory."""

    def __init__(self, root: Path):
        """Initialize output provider.

        Args:
            root: Directory owned by this transform's outputs
        """
        self.root = Path(root).absolute()

    @staticmethod
    def _key(values: Iterable) -> str:
        joined = ",".join(sorted(value.value for value in values))
        return Cache.hash_url(joined)

    def get_content_location(
        self,
        name: str,
        content_types: Iterable[ContentType],
        scopes: Iterable[Scope],
        fmt: Format,
    ) -> Path:
        """Get the output location for a named piece of content.

        Directory slots are created. For jar slots only the parent directory
        is created; the caller writes the file.

        Returns:
            Path of the slot
        """
        folder = "folders" if fmt == Format.DIRECTORY else "jars"
        base = self.root / folder / self._key(content_types) / self._key(scopes)
        if fmt == Format.DIRECTORY:
            location = base / name
            location.mkdir(parents=True, exist_ok=True)
        else:
            location = base / f"{name}.jar"
            location.parent.mkdir(parents=True, exist_ok=True)
        return location

    def delete_all(self) -> None:
        """Remove every output previously written below root."""
        if self.root.exists():
            shutil.rmtree(self.root)
