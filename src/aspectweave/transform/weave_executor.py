"""Weave Executor.

This module runs the external weaving compiler and turns its console output
into Diagnostics.

Design:
    - WeaveExecutor is the seam: a pure (InvocationSpec) -> [Diagnostic]
      call that tests replace with a fake
    - AjcExecutor runs ajc as a child process; it blocks until ajc exits,
      with no timeout and no retry
    - stdout and stderr are read concurrently so messages keep the order in
      which ajc printed them
    - Every emitted message is returned, unfiltered; routing decides what
      it means for the build
"""

import logging
import re
import subprocess
import threading
from abc import ABC, abstractmethod
from typing import IO, Iterable, List, Optional, Sequence, Tuple

from .diagnostics import Diagnostic, Severity
from .invocation_builder import InvocationSpec

logger = logging.getLogger(__name__)

STDOUT = "stdout"
STDERR = "stderr"

# (stream, line) as read from the weaver
ConsoleLine = Tuple[str, str]

# "<file>:<line> [kind] text" or "[kind] text"; ajc only tags errors and warnings
MESSAGE_RE = re.compile(
    r"^(?:(?P<location>\S.*?:\d+(?::\d+)?)\s+)?"
    r"\[(?P<tag>error|warning)\]\s?(?P<text>.*)$",
    re.IGNORECASE,
)

# "1 error, 2 warnings"
SUMMARY_RE = re.compile(r"^\d+ (?:error|warning)s?(?:, \d+ \w+)*$")

WEAVEINFO_PREFIXES = (
    "Join point ",
    "Extending interface ",
    "Type '",
    "Mixing interface ",
)


class WeaverInternalError(Exception):
    """Stack trace reported by the weaver for a fail/abort message."""
    pass


class WeaveExecutor(ABC):
    """Runs the weaving compiler for one InvocationSpec."""

    version: Optional[str] = None

    @abstractmethod
    def run(self, spec: InvocationSpec) -> List[Diagnostic]:
        """Run the weaver once and return every message it emitted."""


class _PendingMessage:
    def __init__(
        self,
        severity: Severity,
        text: str,
        stream: str,
        location: Optional[str] = None,
        tagged: bool = False,
    ):
        self.severity = severity
        self.text = text
        self.stream = stream
        self.location = location
        self.tagged = tagged
        self.detail: List[str] = []

    def finish(self) -> Diagnostic:
        cause = None
        if self.detail and self.severity >= Severity.FAIL:
            cause = WeaverInternalError("\n".join(self.detail))
        return Diagnostic(
            severity=self.severity,
            text=self.text,
            cause=cause,
            location=self.location,
            detail=tuple(self.detail),
        )


def _collect_messages(lines: Iterable[ConsoleLine]) -> List[_PendingMessage]:
    messages: List[_PendingMessage] = []
    # Continuation lines belong to the last message on the same stream
    last_on_stream = {}

    for stream, raw_line in lines:
        line = raw_line.rstrip()
        stripped = line.strip()
        if not stripped:
            continue

        match = MESSAGE_RE.match(stripped)
        if match:
            message = _PendingMessage(
                Severity.from_tag(match.group("tag")),
                match.group("text").strip(),
                stream,
                match.group("location"),
                tagged=True,
            )
        elif line.startswith(WEAVEINFO_PREFIXES):
            message = _PendingMessage(Severity.WEAVEINFO, stripped, stream)
        elif SUMMARY_RE.match(stripped):
            message = _PendingMessage(Severity.INFO, stripped, stream, tagged=True)
        elif stream in last_on_stream:
            last_on_stream[stream].detail.append(line)
            continue
        else:
            message = _PendingMessage(Severity.INFO, stripped, stream)

        messages.append(message)
        last_on_stream[stream] = message

    return messages


def parse_ajc_output(output: str, stream: str = STDOUT) -> List[Diagnostic]:
    """Parse ajc console output into diagnostics, in emission order.

    Tagged lines start a message; weave-info sentences and the trailing
    summary are messages of their own; anything else continues the previous
    message.
    """
    lines = [(stream, line) for line in output.splitlines()]
    return [message.finish() for message in _collect_messages(lines)]


def _pump(stream: IO[str], name: str, lines: List[ConsoleLine], lock: threading.Lock) -> None:
    for line in stream:
        with lock:
            lines.append((name, line))


def read_console(cmd: Sequence[str]) -> Tuple[int, List[ConsoleLine]]:
    """Run a command to completion, returning its exit status and output.

    Lines from stdout and stderr are interleaved in the order they arrive.

    Raises:
        OSError: If the command cannot be launched
    """
    lines: List[ConsoleLine] = []
    lock = threading.Lock()

    with subprocess.Popen(
        list(cmd),
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        errors="replace",
    ) as proc:
        readers = [
            threading.Thread(target=_pump, args=(proc.stdout, STDOUT, lines, lock), daemon=True),
            threading.Thread(target=_pump, args=(proc.stderr, STDERR, lines, lock), daemon=True),
        ]
        for reader in readers:
            reader.start()
        for reader in readers:
            reader.join()
        returncode = proc.wait()

    return returncode, lines


class AjcExecutor(WeaveExecutor):
    """Runs ajc as an external process.

    Example:
        executor = AjcExecutor(["java", "-classpath", "aspectjtools.jar",
                                "org.aspectj.tools.ajc.Main"])
        diagnostics = executor.run(spec)
    """

    def __init__(self, command: Sequence[str], version: Optional[str] = None):
        """Initialize ajc executor.

        Args:
            command: Launcher prefix; ajc arguments are appended to it
            version: Weaver version, for logging
        """
        self.command = list(command)
        self.version = version

    def run(self, spec: InvocationSpec) -> List[Diagnostic]:
        """Run ajc and collect its messages.

        A launch failure is reported as an ABORT diagnostic. ajc prints fail
        and abort messages untagged on stderr, so on a non-zero exit the
        first untagged stderr message becomes the ABORT. Without one, a
        synthetic ERROR records the exit status.
        """
        cmd = self.command + spec.to_args()
        logger.debug(f"Running weaver: {' '.join(cmd)}")

        try:
            returncode, lines = read_console(cmd)
        except OSError as e:
            return [Diagnostic(
                severity=Severity.ABORT,
                text=f"Failed to launch weaver {self.command[0]}: {e}",
                cause=e,
            )]

        messages = _collect_messages(lines)

        if returncode != 0 and not any(m.severity >= Severity.ERROR for m in messages):
            internal = next(
                (m for m in messages if m.stream == STDERR and not m.tagged and m.severity == Severity.INFO),
                None,
            )
            if internal is not None:
                internal.severity = Severity.ABORT
            else:
                messages.append(_PendingMessage(
                    Severity.ERROR,
                    f"Weaver exited with status {returncode}",
                    STDERR,
                    tagged=True,
                ))

        return [message.finish() for message in messages]
