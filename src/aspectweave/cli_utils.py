"""CLI utility functions for aspectweave.

This module provides common utilities used across CLI commands including:
- Configuration discovery
- Input path validation
- Error handling and formatting
"""

import sys
from pathlib import Path
from typing import List, Optional

from aspectweave.config import WeaveConfig, WeaveConfigParser

DEFAULT_CONFIG_NAME = "aspectj.ini"


class ConfigLoader:
    """Loads the weave configuration for a command."""

    @staticmethod
    def load(config_path: Optional[Path], project_dir: Path) -> WeaveConfig:
        """Load aspectj.ini, or fall back to defaults when none exists.

        Args:
            config_path: Explicit config file; must exist when given
            project_dir: Directory searched for aspectj.ini otherwise

        Returns:
            Resolved WeaveConfig

        Raises:
            FileNotFoundError: If an explicit config file doesn't exist
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"{DEFAULT_CONFIG_NAME} not found: {config_path}")
            return WeaveConfigParser(config_path).load()

        default_path = project_dir / DEFAULT_CONFIG_NAME
        if default_path.exists():
            return WeaveConfigParser(default_path).load()
        return WeaveConfig()


class ErrorFormatter:
    """Formats and displays error messages with ANSI color codes."""

    # ANSI color codes
    RED = "\033[1;31m"
    GREEN = "\033[1;32m"
    YELLOW = "\033[1;33m"
    RESET = "\033[0m"

    @staticmethod
    def print_error(title: str, message: str) -> None:
        """Print formatted error message.

        Args:
            title: Error title (e.g., "Weave failed")
            message: Error message details
        """
        print()
        print(f"{ErrorFormatter.RED}✗ {title}{ErrorFormatter.RESET}")
        print()
        print(message)
        print()

    @staticmethod
    def print_success(message: str) -> None:
        print()
        print(f"{ErrorFormatter.GREEN}✓ {message}{ErrorFormatter.RESET}")

    @staticmethod
    def print_warning(message: str) -> None:
        print()
        print(f"{ErrorFormatter.YELLOW}✗ {message}{ErrorFormatter.RESET}")

    @staticmethod
    def handle_file_not_found(error: FileNotFoundError) -> None:
        """Handle FileNotFoundError with standard formatting.

        Args:
            error: The FileNotFoundError to handle
        """
        ErrorFormatter.print_error("Error: File not found", str(error))
        sys.exit(1)

    @staticmethod
    def handle_keyboard_interrupt() -> None:
        """Handle KeyboardInterrupt with standard formatting."""
        ErrorFormatter.print_warning("Weave interrupted")
        sys.exit(130)  # Standard exit code for SIGINT

    @staticmethod
    def handle_unexpected_error(error: Exception, verbose: bool = False) -> None:
        """Handle unexpected errors with standard formatting.

        Args:
            error: The exception to handle
            verbose: Whether to print traceback
        """
        message = f"{type(error).__name__}: {error}"
        ErrorFormatter.print_error("Unexpected error", message)

        if verbose:
            import traceback

            print("Traceback:")
            print(traceback.format_exc())

        sys.exit(1)


class PathValidator:
    """Validates input artifact paths."""

    @staticmethod
    def validate_inputs(paths: List[Path]) -> None:
        """Validate that every input path exists.

        Args:
            paths: Directories or archives passed on the command line

        Raises:
            SystemExit: If any path doesn't exist
        """
        for path in paths:
            if not path.exists():
                print(
                    f"{ErrorFormatter.RED}✗ Error: Path does not exist: {path}{ErrorFormatter.RESET}"
                )
                sys.exit(2)

    @staticmethod
    def validate_output(output: Path, protected: List[Path]) -> None:
        """Validate that the output root doesn't overlap protected paths.

        The output root is deleted before every weave, so it must not be,
        or contain, an input or the project directory.

        Args:
            output: Output root directory
            protected: Inputs, project directory and working directory

        Raises:
            SystemExit: If the output root equals or contains a protected path
        """
        root = output.resolve()
        for path in protected:
            resolved = path.resolve()
            if resolved == root or root in resolved.parents:
                print(
                    f"{ErrorFormatter.RED}✗ Error: Output directory {output} "
                    f"would delete {path}{ErrorFormatter.RESET}"
                )
                sys.exit(2)
