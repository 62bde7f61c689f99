"""Exceptions raised by the weave transform."""

from typing import Optional


class TransformError(Exception):
    """Base class for failures that abort a transform run."""
    pass


class ArtifactCopyError(TransformError):
    """Raised when an excluded artifact cannot be copied to its output slot."""
    pass


class WeaveAbortError(TransformError):
    """Raised when the weaver reported an error-or-worse diagnostic.

    Attributes:
        cause: Underlying exception attached to the diagnostic, if any
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause
