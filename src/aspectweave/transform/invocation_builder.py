"""Weaver Invocation Builder.

This module assembles the ajc argument set from the routed artifacts and the
resolved configuration.

Design:
    - inpath and classpath keep the discovery order of the routed artifacts,
      since the weaver resolves symbols in path order
    - All path lists are joined with os.pathsep
    - The Java runtime library is appended last, and only when requested
    - -classpath is left out entirely when there is nothing to put on it
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from ..config.weave_config import WeaveConfig
from .artifact_router import RoutingResult
from .artifacts import CONTENT_CLASS, SCOPE_FULL_PROJECT, Format
from .output_provider import OutputProvider

MAIN_OUTPUT_NAME = "main"


@dataclass(frozen=True)
class InvocationSpec:
    """Fully assembled weaver arguments for one run."""

    source_level: str
    target_level: str
    encoding: str
    inpath: str
    classpath: str
    bootclasspath: str
    output_dir: Path

    def to_args(self) -> List[str]:
        """Render the ajc command-line arguments.

        Example:
            ['-source', '1.8', '-target', '1.8', '-showWeaveInfo',
             '-encoding', 'UTF-8', '-inpath', '/a:/b', '-d', '/out/main',
             '-bootclasspath', '/sdk/android.jar', '-classpath', '/c']
        """
        args = [
            "-source", self.source_level,
            "-target", self.target_level,
            "-showWeaveInfo",
            "-encoding", self.encoding,
            "-inpath", self.inpath,
            "-d", str(self.output_dir),
            "-bootclasspath", self.bootclasspath,
        ]
        if self.classpath:
            args.extend(["-classpath", self.classpath])
        return args


def join_paths(paths: Iterable) -> str:
    """Join paths with the platform path separator."""
    return os.pathsep.join(str(path) for path in paths)


class JavaRuntimeLocator:
    """Finds the Java runtime library (rt.jar) for the weaver classpath."""

    RT_JAR_FRAGMENT = os.sep.join(("jre", "lib", "rt.jar"))

    @classmethod
    def find(
        cls,
        classpath_entries: Sequence[str] = (),
        java_home: Optional[str] = None,
    ) -> Optional[str]:
        """Locate rt.jar.

        The last compile classpath entry containing jre/lib/rt.jar wins. When
        none does, JAVA_HOME is checked for jre/lib/rt.jar and lib/rt.jar.

        Args:
            classpath_entries: Entries of the host's Java compile classpath
            java_home: JDK home directory, if known

        Returns:
            Path of rt.jar, or None if it could not be resolved
        """
        found = None
        for entry in classpath_entries:
            if cls.RT_JAR_FRAGMENT in entry:
                found = entry
        if found:
            return found

        if java_home:
            for candidate in (
                Path(java_home) / "jre" / "lib" / "rt.jar",
                Path(java_home) / "lib" / "rt.jar",
            ):
                if candidate.is_file():
                    return str(candidate)
        return None


class InvocationBuilder:
    """Builds an InvocationSpec for one weave run."""

    def __init__(
        self,
        config: WeaveConfig,
        output_provider: OutputProvider,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize invocation builder.

        Args:
            config: Resolved weave configuration
            output_provider: Provider of the main output slot
            logger: Logger for configuration warnings
        """
        self.config = config
        self.output_provider = output_provider
        self.logger = logger or logging.getLogger(__name__)

    def build(
        self,
        routing: RoutingResult,
        bootclasspath: Sequence[str],
        runtime_library: Optional[str] = None,
    ) -> InvocationSpec:
        """Build the weaver invocation.

        Args:
            routing: Routed artifacts of this run
            bootclasspath: Boot classpath entries, in the order supplied
            runtime_library: Resolved Java runtime library path, if any

        Returns:
            The assembled InvocationSpec
        """
        classpath_entries = [str(artifact.path) for artifact in routing.classpath_only]
        if self.config.javart_needed:
            if runtime_library:
                classpath_entries.append(runtime_library)
            else:
                self.logger.error("Can not extract java runtime classpath.")

        output_dir = self.output_provider.get_content_location(
            MAIN_OUTPUT_NAME, CONTENT_CLASS, SCOPE_FULL_PROJECT, Format.DIRECTORY
        )

        options = self.config.compile_options
        return InvocationSpec(
            source_level=options.source_compatibility,
            target_level=options.target_compatibility,
            encoding=options.encoding,
            inpath=join_paths(artifact.path for artifact in routing.to_weave),
            classpath=join_paths(classpath_entries),
            bootclasspath=join_paths(bootclasspath),
            output_dir=output_dir,
        )
