"""
Weave transform components for aspectweave.

This module provides the transform implementation including:
- Exclusion of dependencies from weaving
- Artifact routing into inpath and classpath
- Weaver invocation assembly and execution
- Diagnostic routing
"""

from .artifact_router import ArtifactRouter, ClassificationResult, RoutingResult
from .artifacts import (
    CONTENT_CLASS,
    SCOPE_FULL_PROJECT,
    Artifact,
    ArtifactKind,
    ContentType,
    Format,
    Scope,
    TransformInput,
)
from .diagnostics import Diagnostic, DiagnosticRouter, RouteResult, Severity
from .errors import ArtifactCopyError, TransformError, WeaveAbortError
from .exclusion import is_excluded
from .invocation_builder import InvocationBuilder, InvocationSpec, JavaRuntimeLocator
from .output_provider import OutputProvider
from .transform import AspectJTransform, TransformResult
from .weave_executor import AjcExecutor, WeaveExecutor, WeaverInternalError, parse_ajc_output

__all__ = [
    "AspectJTransform",
    "TransformResult",
    "Artifact",
    "ArtifactKind",
    "TransformInput",
    "ContentType",
    "Scope",
    "Format",
    "CONTENT_CLASS",
    "SCOPE_FULL_PROJECT",
    "OutputProvider",
    "is_excluded",
    "ArtifactRouter",
    "RoutingResult",
    "ClassificationResult",
    "InvocationBuilder",
    "InvocationSpec",
    "JavaRuntimeLocator",
    "WeaveExecutor",
    "AjcExecutor",
    "parse_ajc_output",
    "WeaverInternalError",
    "Diagnostic",
    "DiagnosticRouter",
    "RouteResult",
    "Severity",
    "TransformError",
    "ArtifactCopyError",
    "WeaveAbortError",
]
