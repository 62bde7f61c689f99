"""Weaver diagnostics and their routing to build outcomes.

Every message the weaver emits becomes a Diagnostic. The DiagnosticRouter
logs each one at a visibility derived from its severity and aborts the run
once the list is drained if any error-or-worse message was seen. The first
such message is the reported root cause.
"""

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional, Sequence, Tuple

from ..log_utils import QUIET
from .errors import WeaveAbortError


class Severity(IntEnum):
    """Weaver message kinds, totally ordered from least to most severe."""

    WEAVEINFO = 5
    DEBUG = 10
    INFO = 20
    TASKTAG = 25
    WARNING = 30
    ERROR = 40
    FAIL = 50
    ABORT = 60

    @classmethod
    def from_tag(cls, tag: str) -> "Severity":
        """Map an ajc console tag (e.g. "error", "task") to a severity."""
        tag = tag.strip().lower()
        if tag == "task":
            return cls.TASKTAG
        return cls[tag.upper()]


@dataclass(frozen=True)
class Diagnostic:
    """One message emitted by the weaver.

    Attributes:
        severity: Message kind
        text: Message text
        cause: Underlying exception, if the weaver reported one
        location: "file:line" source location, if any
        detail: Continuation lines (source excerpt, stack trace)
    """

    severity: Severity
    text: str
    cause: Optional[BaseException] = None
    location: Optional[str] = None
    detail: Tuple[str, ...] = ()

    @property
    def is_fatal(self) -> bool:
        return self.severity >= Severity.ERROR

    def render(self) -> str:
        """Message text with its location prefix and detail lines."""
        text = f"{self.location} {self.text}" if self.location else self.text
        if self.detail:
            text = "\n".join((text,) + self.detail)
        return text


@dataclass
class RouteResult:
    """Classification of a diagnostic list."""

    diagnostics: List[Diagnostic] = field(default_factory=list)
    fatal: Optional[Diagnostic] = None

    @property
    def aborted(self) -> bool:
        return self.fatal is not None


class DiagnosticRouter:
    """Logs weaver diagnostics and decides pass/fail for the run."""

    def __init__(self, logger: Optional[logging.Logger] = None, verbose: bool = False):
        """Initialize diagnostic router.

        Args:
            logger: Logger that receives every diagnostic
            verbose: Log everything at QUIET and skip severity handling
        """
        self.logger = logger or logging.getLogger(__name__)
        self.verbose = verbose

    def classify(self, diagnostics: Sequence[Diagnostic]) -> RouteResult:
        """Log every diagnostic in emission order and find the first fatal one.

        Returns:
            RouteResult whose fatal field holds the first error-or-worse message
        """
        result = RouteResult(diagnostics=list(diagnostics))

        for diagnostic in diagnostics:
            message = diagnostic.render()
            if self.verbose:
                # level up weave info for debugging
                self.logger.log(QUIET, message)
            elif diagnostic.severity >= Severity.ERROR:
                self.logger.error(message, exc_info=diagnostic.cause)
                if result.fatal is None:
                    result.fatal = diagnostic
            elif diagnostic.severity >= Severity.WARNING:
                self.logger.warning(message)
            elif diagnostic.severity >= Severity.DEBUG:
                self.logger.info(message)
            else:
                self.logger.debug(message)

        return result

    def route(self, diagnostics: Sequence[Diagnostic]) -> RouteResult:
        """Log all diagnostics, then abort if any was error-or-worse.

        Raises:
            WeaveAbortError: Carrying the first fatal message and its cause
        """
        result = self.classify(diagnostics)
        if result.fatal is not None:
            fatal = result.fatal
            raise WeaveAbortError(fatal.text, cause=fatal.cause) from fatal.cause
        return result
