"""
AspectJ weave transform.

This module coordinates one weave run, from cleaning previous outputs to
committing the woven classes:
1. Clean all outputs
2. Resolve the Java runtime library (if required)
3. Route artifacts into inpath and classpath, copying excluded ones verbatim
4. Resolve the boot classpath
5. Assemble the weaver invocation
6. Run the weaver
7. Route its diagnostics to success or abort

The transform sits in front of any other bytecode step so that exclude rules
still see the original artifact paths. It is never incremental: aspect and
ordinary bytecode are woven across each other, so a partial re-weave cannot
be trusted.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional, Sequence

from ..config.android_sdk import AndroidSdkError, resolve_boot_classpath
from ..config.weave_config import WeaveConfig
from ..log_utils import QUIET
from .artifact_router import ArtifactRouter, RoutingResult
from .artifacts import (
    CONTENT_CLASS,
    SCOPE_FULL_PROJECT,
    SCOPE_PROVIDED_ONLY,
    ContentType,
    Scope,
    TransformInput,
)
from .diagnostics import Diagnostic, DiagnosticRouter
from .errors import TransformError
from .invocation_builder import InvocationBuilder, InvocationSpec, JavaRuntimeLocator
from .output_provider import OutputProvider
from .weave_executor import WeaveExecutor


@dataclass
class TransformResult:
    """Result of a transform run that did not abort."""

    success: bool
    skipped: bool = False
    routing: Optional[RoutingResult] = None
    invocation: Optional[InvocationSpec] = None
    diagnostics: List[Diagnostic] = field(default_factory=list)
    message: str = ""


class AspectJTransform:
    """
    Weaves aspects into the compiled classes of an Android build.

    Example usage:
        transform = AspectJTransform(config, OutputProvider(out_dir), executor)
        result = transform.transform(
            inputs=[TransformInput.from_paths([classes_dir, lib_jar])],
            referenced_inputs=[TransformInput.from_paths([provided_jar])],
        )
    """

    name = "AspectJ"

    def __init__(
        self,
        config: WeaveConfig,
        output_provider: OutputProvider,
        executor: WeaveExecutor,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the transform.

        Args:
            config: Resolved weave configuration, immutable for the run
            output_provider: Content-addressed output location provider
            executor: Runs the weaving compiler
            logger: Logger for lifecycle and diagnostic messages
        """
        self.config = config
        self.output_provider = output_provider
        self.executor = executor
        self.logger = logger or logging.getLogger(__name__)

    @property
    def input_types(self) -> FrozenSet[ContentType]:
        return CONTENT_CLASS

    @property
    def scopes(self) -> FrozenSet[Scope]:
        return SCOPE_FULL_PROJECT if self.config.enabled else frozenset()

    @property
    def referenced_scopes(self) -> FrozenSet[Scope]:
        return SCOPE_PROVIDED_ONLY

    @property
    def is_incremental(self) -> bool:
        # aspect and java bytecode are woven across each other
        return False

    def transform(
        self,
        inputs: Iterable[TransformInput],
        referenced_inputs: Iterable[TransformInput] = (),
        java_classpath: Sequence[str] = (),
        is_incremental: bool = False,
    ) -> TransformResult:
        """
        Run a full weave.

        Args:
            inputs: Primary inputs, subject to weaving
            referenced_inputs: Referenced-only inputs, classpath context
            java_classpath: Host's Java compile classpath, searched for rt.jar
            is_incremental: Ignored; every run is a full weave

        Returns:
            TransformResult for a successful or skipped run

        Raises:
            TransformError: If the run aborts; outputs are then undefined
        """
        config = self.config

        self.output_provider.delete_all()

        if not config.enabled:
            self.logger.log(QUIET, "AspectJ weaving is disabled.")
            return TransformResult(success=True, skipped=True, message="disabled")

        if is_incremental:
            self.logger.debug("Incremental run requested; performing a full weave.")

        self.logger.log(QUIET, f"AspectJ Compiler, version {self.executor.version or 'unknown'}")

        runtime_library = None
        if config.javart_needed:
            java_home = config.java_home or os.environ.get("JAVA_HOME")
            runtime_library = JavaRuntimeLocator.find(java_classpath, java_home)

        self.logger.log(QUIET, "Excluding dependencies from AspectJ Compiler inpath ...")
        self.logger.log(
            QUIET,
            "Note: The excluded will not be eliminated from the compilation. "
            + "They're just being used as classpath instead.",
        )
        routing = ArtifactRouter(
            self.output_provider, config.exclude_rules, self.logger
        ).route(inputs, referenced_inputs)

        try:
            bootclasspath = resolve_boot_classpath(config)
        except AndroidSdkError as e:
            raise TransformError(str(e)) from e

        invocation = InvocationBuilder(config, self.output_provider, self.logger).build(
            routing, bootclasspath, runtime_library
        )

        if not routing.to_weave:
            self.logger.log(QUIET, "Nothing to weave.")
            return TransformResult(
                success=True,
                routing=routing,
                invocation=invocation,
                message="nothing to weave",
            )

        self.logger.log(QUIET, "Weaving ...")
        diagnostics = self.executor.run(invocation)
        DiagnosticRouter(self.logger, verbose=config.verbose).route(diagnostics)

        return TransformResult(
            success=True,
            routing=routing,
            invocation=invocation,
            diagnostics=diagnostics,
            message="woven",
        )
