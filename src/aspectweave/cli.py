"""
Command-line interface for aspectweave.

This module provides the `aspectweave` CLI tool that weaves AspectJ aspects
into compiled Android classes.
"""

import argparse
import os
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from aspectweave import __version__
from aspectweave.cli_utils import ConfigLoader, ErrorFormatter, PathValidator
from aspectweave.config import WeaveConfig, WeaveConfigError
from aspectweave.log_utils import setup_logging
from aspectweave.packages import Cache, WeaverToolchain, WeaverToolchainError
from aspectweave.transform import (
    AjcExecutor,
    AspectJTransform,
    OutputProvider,
    TransformError,
    TransformInput,
    WeaveAbortError,
)


@dataclass
class WeaveArgs:
    """Arguments for the weave command."""

    output: Path
    inputs: List[Path] = field(default_factory=list)
    referenced: List[Path] = field(default_factory=list)
    config: Optional[Path] = None
    project_dir: Path = field(default_factory=Path.cwd)
    java_classpath: Optional[str] = None
    verbose: bool = False
    quiet: bool = False
    log_file: Optional[Path] = None


@dataclass
class FetchArgs:
    """Arguments for the fetch command."""

    config: Optional[Path] = None
    project_dir: Path = field(default_factory=Path.cwd)
    verbose: bool = False


def create_toolchain(config: WeaveConfig, project_dir: Path, show_progress: bool = True) -> WeaverToolchain:
    """Create the weaver toolchain described by a configuration."""
    return WeaverToolchain(
        Cache(project_dir),
        config.weaver_version,
        java=config.java,
        jar_path=Path(config.weaver_jar) if config.weaver_jar else None,
        show_progress=show_progress,
    )


def weave_command(args: WeaveArgs) -> None:
    """Weave aspects into compiled classes.

    Examples:
        aspectweave weave -i build/classes -o build/woven
        aspectweave weave -i classes -i libs/okhttp.jar -r provided.jar -o out
        aspectweave weave -c aspectj.ini -i classes -o out --verbose
    """
    setup_logging(verbose=args.verbose, quiet=args.quiet, log_file=args.log_file)

    try:
        config = ConfigLoader.load(args.config, args.project_dir)

        command: List[str] = []
        if config.enabled:
            command = create_toolchain(config, args.project_dir, not args.quiet).get_command()
        executor = AjcExecutor(command, version=config.weaver_version)

        transform = AspectJTransform(config, OutputProvider(args.output), executor)

        java_classpath: List[str] = []
        if args.java_classpath:
            java_classpath = args.java_classpath.split(os.pathsep)

        start_time = time.time()
        result = transform.transform(
            inputs=[TransformInput.from_paths(args.inputs)],
            referenced_inputs=[TransformInput.from_paths(args.referenced)],
            java_classpath=java_classpath,
        )
        weave_time = time.time() - start_time

        if result.skipped:
            ErrorFormatter.print_warning("Weaving skipped: disabled in configuration")
            sys.exit(0)

        ErrorFormatter.print_success("Weave successful!")
        print()
        if result.invocation is not None:
            print(f"Output: {result.invocation.output_dir}")
        print(f"Weave time: {weave_time:.2f}s")
        sys.exit(0)

    except WeaveAbortError as e:
        ErrorFormatter.print_error("Weave failed!", str(e))
        sys.exit(1)
    except (TransformError, WeaveConfigError, WeaverToolchainError) as e:
        ErrorFormatter.print_error("Error", str(e))
        sys.exit(1)
    except FileNotFoundError as e:
        ErrorFormatter.handle_file_not_found(e)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def fetch_command(args: FetchArgs) -> None:
    """Download or validate the weaver jar.

    Examples:
        aspectweave fetch
        aspectweave fetch -c aspectj.ini
    """
    setup_logging(verbose=args.verbose)

    try:
        config = ConfigLoader.load(args.config, args.project_dir)
        toolchain = create_toolchain(config, args.project_dir)
        jar = toolchain.ensure_weaver()
        ErrorFormatter.print_success(f"AspectJ tools {config.weaver_version} ready")
        print(f"Jar: {jar}")
        sys.exit(0)
    except (WeaveConfigError, WeaverToolchainError) as e:
        ErrorFormatter.print_error("Error", str(e))
        sys.exit(1)
    except FileNotFoundError as e:
        ErrorFormatter.handle_file_not_found(e)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def main(argv: Optional[List[str]] = None) -> None:
    """aspectweave - AspectJ binary weaving for Android builds."""
    parser = argparse.ArgumentParser(
        prog="aspectweave",
        description="aspectweave - AspectJ binary weaving for Android builds",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"aspectweave {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Weave command
    weave_parser = subparsers.add_parser(
        "weave",
        help="Weave aspects into compiled classes",
    )
    weave_parser.add_argument(
        "-i",
        "--input",
        dest="inputs",
        action="append",
        type=Path,
        default=[],
        help="Primary input: class directory or jar (repeatable)",
    )
    weave_parser.add_argument(
        "-r",
        "--referenced",
        action="append",
        type=Path,
        default=[],
        help="Referenced-only input used as classpath (repeatable)",
    )
    weave_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        required=True,
        help="Output root directory",
    )
    weave_parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to aspectj.ini (default: <project-dir>/aspectj.ini if present)",
    )
    weave_parser.add_argument(
        "--project-dir",
        type=Path,
        default=Path.cwd(),
        help="Project directory (default: current directory)",
    )
    weave_parser.add_argument(
        "--java-classpath",
        default=None,
        help="Java compile classpath searched for rt.jar",
    )
    weave_parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write a detailed log to this file",
    )
    weave_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output",
    )
    weave_parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only show quiet-level messages and errors",
    )

    # Fetch command
    fetch_parser = subparsers.add_parser(
        "fetch",
        help="Download the AspectJ weaver jar into the cache",
    )
    fetch_parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to aspectj.ini",
    )
    fetch_parser.add_argument(
        "--project-dir",
        type=Path,
        default=Path.cwd(),
        help="Project directory (default: current directory)",
    )
    fetch_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output",
    )

    parsed_args = parser.parse_args(argv)

    if not parsed_args.command:
        parser.print_help()
        sys.exit(0)

    if parsed_args.command == "weave":
        PathValidator.validate_inputs(parsed_args.inputs + parsed_args.referenced)
        PathValidator.validate_output(
            parsed_args.output,
            parsed_args.inputs + parsed_args.referenced + [parsed_args.project_dir, Path.cwd()],
        )
        weave_args = WeaveArgs(
            output=parsed_args.output,
            inputs=parsed_args.inputs,
            referenced=parsed_args.referenced,
            config=parsed_args.config,
            project_dir=parsed_args.project_dir,
            java_classpath=parsed_args.java_classpath,
            verbose=parsed_args.verbose,
            quiet=parsed_args.quiet,
            log_file=parsed_args.log_file,
        )
        weave_command(weave_args)
    elif parsed_args.command == "fetch":
        fetch_args = FetchArgs(
            config=parsed_args.config,
            project_dir=parsed_args.project_dir,
            verbose=parsed_args.verbose,
        )
        fetch_command(fetch_args)


if __name__ == "__main__":
    main()
