"""
Artifact model for the weave transform.

An artifact is a directory of compiled classes or a class archive (jar). The
host build hands the transform two ordered collections of TransformInput:
primary inputs, which may be woven, and referenced-only inputs, which are
only used for symbol resolution.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import FrozenSet, Iterator, List, Optional


class ArtifactKind(Enum):
    DIRECTORY = "directory"
    ARCHIVE = "archive"


class ContentType(Enum):
    CLASSES = "classes"


class Scope(Enum):
    PROJECT = "project"
    PROJECT_LOCAL_DEPS = "project_local_deps"
    SUB_PROJECTS = "sub_projects"
    SUB_PROJECTS_LOCAL_DEPS = "sub_projects_local_deps"
    EXTERNAL_LIBRARIES = "external_libraries"
    PROVIDED_ONLY = "provided_only"


class Format(Enum):
    DIRECTORY = "directory"
    JAR = "jar"


CONTENT_CLASS: FrozenSet[ContentType] = frozenset({ContentType.CLASSES})

SCOPE_FULL_PROJECT: FrozenSet[Scope] = frozenset({
    Scope.PROJECT,
    Scope.PROJECT_LOCAL_DEPS,
    Scope.SUB_PROJECTS,
    Scope.SUB_PROJECTS_LOCAL_DEPS,
    Scope.EXTERNAL_LIBRARIES,
})

SCOPE_PROVIDED_ONLY: FrozenSet[Scope] = frozenset({Scope.PROVIDED_ONLY})


@dataclass(frozen=True)
class Artifact:
    """A directory or archive of compiled classes.

    Attributes:
        path: Absolute filesystem path
        name: Logical name given by the host (defaults to the file name)
        kind: Directory or archive
    """

    path: Path
    name: str
    kind: ArtifactKind

    @classmethod
    def from_path(cls, path: Path, name: Optional[str] = None) -> "Artifact":
        """Create an artifact, inferring its kind from the filesystem."""
        path = Path(path).absolute()
        kind = ArtifactKind.DIRECTORY if path.is_dir() else ArtifactKind.ARCHIVE
        return cls(path=path, name=name or path.name, kind=kind)

    @property
    def is_directory(self) -> bool:
        return self.kind == ArtifactKind.DIRECTORY

    @property
    def slot_name(self) -> str:
        """Base name of the output slot (archives drop their .jar suffix)."""
        if self.kind == ArtifactKind.ARCHIVE:
            return self.name.replace(".jar", "")
        return self.name


@dataclass
class TransformInput:
    """One bundle of inputs as presented by the host build."""

    directory_inputs: List[Artifact] = field(default_factory=list)
    jar_inputs: List[Artifact] = field(default_factory=list)

    @classmethod
    def from_paths(cls, paths: List[Path]) -> "TransformInput":
        """Build an input bundle from paths, keeping their order per kind."""
        bundle = cls()
        for path in paths:
            artifact = Artifact.from_path(path)
            if artifact.is_directory:
                bundle.directory_inputs.append(artifact)
            else:
                bundle.jar_inputs.append(artifact)
        return bundle

    def __iter__(self) -> Iterator[Artifact]:
        yield from self.directory_inputs
        yield from self.jar_inputs
