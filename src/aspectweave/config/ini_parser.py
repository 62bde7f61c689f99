"""
aspectj.ini configuration parser.

This module reads the weave step's INI file and resolves it into a frozen
WeaveConfig.

Example aspectj.ini:
    [aspectj]
    enabled = true
    javart_needed = false
    compile_sdk = android-34

    [aspectj.compile_options]
    source_compatibility = 1.8
    target_compatibility = 1.8
    encoding = UTF-8

    [aspectj.exclude]
    rules =
        com.squareup.okhttp3:okhttp
        com.google.guava:guava
"""

import configparser
from pathlib import Path
from typing import List, Optional

from .weave_config import (
    DEFAULT_WEAVER_VERSION,
    CompileOptions,
    ExcludeRule,
    WeaveConfig,
    WeaveConfigError,
)

MAIN_SECTION = "aspectj"
OPTIONS_SECTION = "aspectj.compile_options"
EXCLUDE_SECTION = "aspectj.exclude"


class WeaveConfigParser:
    """
    Parser for aspectj.ini configuration files.

    Usage:
        config = WeaveConfigParser(Path("aspectj.ini")).load()
        if config.enabled:
            ...
    """

    def __init__(self, ini_path: Path):
        """
        Initialize the parser with an aspectj.ini file.

        Args:
            ini_path: Path to the aspectj.ini file

        Raises:
            WeaveConfigError: If the file doesn't exist or cannot be parsed
        """
        self.ini_path = ini_path

        if not ini_path.exists():
            raise WeaveConfigError(f"Configuration file not found: {ini_path}")

        self.config = configparser.ConfigParser(
            allow_no_value=True, interpolation=configparser.ExtendedInterpolation()
        )

        try:
            self.config.read(ini_path, encoding="utf-8")
        except configparser.Error as e:
            raise WeaveConfigError(f"Failed to parse {ini_path}: {e}") from e

    def load(self) -> WeaveConfig:
        """
        Resolve the whole file into a WeaveConfig.

        Missing sections and keys fall back to WeaveConfig defaults.

        Raises:
            WeaveConfigError: If a value is malformed
        """
        defaults = CompileOptions()
        compile_options = CompileOptions(
            source_compatibility=self._get(
                OPTIONS_SECTION, "source_compatibility", defaults.source_compatibility
            ),
            target_compatibility=self._get(
                OPTIONS_SECTION, "target_compatibility", defaults.target_compatibility
            ),
            encoding=self._get(OPTIONS_SECTION, "encoding", defaults.encoding),
        )

        return WeaveConfig(
            enabled=self._get_bool("enabled", True),
            javart_needed=self._get_bool("javart_needed", False),
            verbose=self._get_bool("verbose", False),
            compile_options=compile_options,
            exclude_rules=tuple(self.get_exclude_rules()),
            bootclasspath=tuple(self._get_list(MAIN_SECTION, "bootclasspath")),
            compile_sdk=self._get(MAIN_SECTION, "compile_sdk"),
            android_sdk=self._get(MAIN_SECTION, "android_sdk"),
            java_home=self._get(MAIN_SECTION, "java_home"),
            weaver_version=self._get(MAIN_SECTION, "weaver_version", DEFAULT_WEAVER_VERSION),
            weaver_jar=self._get(MAIN_SECTION, "weaver_jar"),
            java=self._get(MAIN_SECTION, "java", "java"),
        )

    def get_exclude_rules(self) -> List[ExcludeRule]:
        """
        Parse the exclude rule list.

        Example:
            For rules =
                com.google.guava:guava, org.greenrobot:eventbus
            Returns: [ExcludeRule('com.google.guava', 'guava'),
                      ExcludeRule('org.greenrobot', 'eventbus')]
        """
        return [ExcludeRule.parse(rule) for rule in self._get_list(EXCLUDE_SECTION, "rules")]

    def _get(self, section: str, key: str, default: Optional[str] = None) -> Optional[str]:
        if section not in self.config:
            return default
        try:
            value = self.config[section].get(key)
        except configparser.InterpolationError as e:
            raise WeaveConfigError(f"Failed to resolve '{key}' in {self.ini_path}: {e}") from e
        if value is None or not value.strip():
            return default
        return value.strip()

    def _get_bool(self, key: str, default: bool) -> bool:
        value = self._get(MAIN_SECTION, key)
        if value is None:
            return default
        states = configparser.ConfigParser.BOOLEAN_STATES
        if value.lower() not in states:
            raise WeaveConfigError(
                f"Invalid boolean for '{key}' in {self.ini_path}: '{value}'"
            )
        return states[value.lower()]

    def _get_list(self, section: str, key: str) -> List[str]:
        raw = self._get(section, key, "")
        # Split on newlines and commas, strip whitespace, filter empty
        items = []
        for line in raw.split("\n"):
            for item in line.split(","):
                item = item.strip()
                if item:
                    items.append(item)
        return items
