"""
Resolved configuration for a weave run.

A WeaveConfig is built once (usually by WeaveConfigParser) and handed to the
transform. It is frozen: nothing in a run mutates it.
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple


DEFAULT_WEAVER_VERSION = "1.9.22.1"


class WeaveConfigError(Exception):
    """Exception raised for weave configuration errors."""

    pass


@dataclass(frozen=True)
class ExcludeRule:
    """A (group, module) dependency kept out of the weaver inpath.

    Example:
        ExcludeRule("com.squareup.okhttp3", "okhttp") matches any artifact
        whose absolute path contains "com.squareup.okhttp3/okhttp".
    """

    group: str
    module: str

    @classmethod
    def parse(cls, value: str) -> "ExcludeRule":
        """Parse a "group:module" string.

        Raises:
            WeaveConfigError: If the value is not exactly group:module
        """
        parts = [part.strip() for part in value.strip().split(":")]
        if len(parts) != 2 or not all(parts):
            raise WeaveConfigError(
                f"Invalid exclude rule '{value.strip()}': expected 'group:module'"
            )
        return cls(group=parts[0], module=parts[1])

    def fragment(self) -> str:
        """Path fragment this rule matches, joined with the platform separator."""
        return os.sep.join((self.group, self.module))

    def __str__(self) -> str:
        return f"{self.group}:{self.module}"


@dataclass(frozen=True)
class CompileOptions:
    """Language levels and source encoding passed to the weaver."""

    source_compatibility: str = "1.7"
    target_compatibility: str = "1.7"
    encoding: str = "UTF-8"


@dataclass(frozen=True)
class WeaveConfig:
    """Externally resolved, read-only configuration of the weave step."""

    enabled: bool = True
    javart_needed: bool = False
    verbose: bool = False
    compile_options: CompileOptions = field(default_factory=CompileOptions)
    exclude_rules: Tuple[ExcludeRule, ...] = ()
    bootclasspath: Tuple[str, ...] = ()
    compile_sdk: Optional[str] = None
    android_sdk: Optional[str] = None
    java_home: Optional[str] = None
    weaver_version: str = DEFAULT_WEAVER_VERSION
    weaver_jar: Optional[str] = None
    java: str = "java"
