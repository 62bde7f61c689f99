"""Configuration parsing modules for aspectweave."""

from .android_sdk import AndroidSdkError, resolve_boot_classpath
from .ini_parser import WeaveConfigParser
from .weave_config import CompileOptions, ExcludeRule, WeaveConfig, WeaveConfigError

__all__ = [
    "WeaveConfigParser",
    "WeaveConfig",
    "WeaveConfigError",
    "CompileOptions",
    "ExcludeRule",
    "AndroidSdkError",
    "resolve_boot_classpath",
]
