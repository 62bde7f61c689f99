"""Artifact Router.

This module partitions transform inputs into the artifacts handed to the
weaver's inpath and the artifacts only put on its classpath.

Design:
    - Referenced-only artifacts always go to the classpath
    - Excluded primary artifacts are copied verbatim to their own output slot
      and also go to the classpath, so nothing is dropped from the build
    - Everything else is woven; its output is produced by the weaver itself
"""

import hashlib
import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from ..config.weave_config import ExcludeRule
from ..log_utils import QUIET
from .artifacts import CONTENT_CLASS, SCOPE_FULL_PROJECT, Artifact, Format, TransformInput
from .errors import ArtifactCopyError
from .exclusion import is_excluded
from .output_provider import OutputProvider


def path_hash(path: Path) -> str:
    """Deterministic short hash of an absolute path, used for slot names."""
    return hashlib.sha256(str(Path(path).absolute()).encode("utf-8")).hexdigest()[:16]


@dataclass(frozen=True)
class ClassificationResult:
    """Verdict for one primary artifact."""

    artifact: Artifact
    excluded: bool
    output: Optional[Path] = None


@dataclass
class RoutingResult:
    """Outcome of routing all artifacts of one run.

    Attributes:
        to_weave: Primary artifacts passed on the weaver inpath
        classpath_only: Referenced-only plus excluded primary artifacts
        classifications: One verdict per primary artifact, in discovery order
    """

    to_weave: List[Artifact] = field(default_factory=list)
    classpath_only: List[Artifact] = field(default_factory=list)
    classifications: List[ClassificationResult] = field(default_factory=list)

    @property
    def excluded(self) -> List[ClassificationResult]:
        return [c for c in self.classifications if c.excluded]

    @property
    def nothing_excluded(self) -> bool:
        return not self.excluded


class ArtifactRouter:
    """Splits primary and referenced-only inputs into inpath and classpath."""

    def __init__(
        self,
        output_provider: OutputProvider,
        rules: Sequence[ExcludeRule],
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize artifact router.

        Args:
            output_provider: Provider for the excluded artifacts' output slots
            rules: Exclude rules for this run
            logger: Logger for routing messages
        """
        self.output_provider = output_provider
        self.rules = tuple(rules)
        self.logger = logger or logging.getLogger(__name__)

    def route(
        self,
        inputs: Iterable[TransformInput],
        referenced_inputs: Iterable[TransformInput],
    ) -> RoutingResult:
        """Route every artifact of a run.

        Args:
            inputs: Primary inputs, subject to weaving
            referenced_inputs: Inputs used only for symbol resolution

        Returns:
            RoutingResult with disjoint to_weave and classpath_only sets

        Raises:
            ArtifactCopyError: If an excluded artifact cannot be copied
        """
        result = RoutingResult()

        for bundle in referenced_inputs:
            result.classpath_only.extend(bundle)

        for bundle in inputs:
            for artifact in bundle:
                if is_excluded(artifact.path, self.rules):
                    output = self._copy_excluded(artifact)
                    result.classpath_only.append(artifact)
                    result.classifications.append(
                        ClassificationResult(artifact=artifact, excluded=True, output=output)
                    )
                else:
                    result.to_weave.append(artifact)
                    result.classifications.append(
                        ClassificationResult(artifact=artifact, excluded=False)
                    )

        if result.nothing_excluded:
            self.logger.log(QUIET, "Nothing excluded.")

        return result

    def _copy_excluded(self, artifact: Artifact) -> Path:
        """Copy an excluded artifact verbatim into its output slot."""
        slot_name = f"{artifact.slot_name}-{path_hash(artifact.path)}"
        try:
            if artifact.is_directory:
                self.logger.log(QUIET, f"Folder [{artifact.path.name}] has been excluded.")
                output = self.output_provider.get_content_location(
                    slot_name, CONTENT_CLASS, SCOPE_FULL_PROJECT, Format.DIRECTORY
                )
                shutil.copytree(artifact.path, output / artifact.path.name, dirs_exist_ok=True)
            else:
                self.logger.log(QUIET, f"Jar [{artifact.path.name}] has been excluded.")
                output = self.output_provider.get_content_location(
                    slot_name, CONTENT_CLASS, SCOPE_FULL_PROJECT, Format.JAR
                )
                shutil.copyfile(artifact.path, output)
        except OSError as e:
            raise ArtifactCopyError(f"Failed to copy excluded artifact {artifact.path}: {e}") from e
        return output
