"""Logging setup for aspectweave.

The host build distinguishes a "quiet" visibility that stays on even when the
build is run with -q. It is registered here as an extra level between WARNING
and ERROR so lifecycle messages survive a quiet console.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

QUIET = 35
logging.addLevelName(QUIET, "QUIET")

DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
PLAIN_FORMAT = "%(message)s"


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """Setup root logging for a weave run.

    Args:
        verbose: Show debug output with timestamps
        quiet: Only show QUIET and ERROR messages
        log_file: Optional path for a rotating log file

    Returns:
        The configured root logger
    """
    logger = logging.getLogger()
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    if quiet:
        level = QUIET
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO
    logger.setLevel(logging.DEBUG if log_file else level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(DETAILED_FORMAT if verbose else PLAIN_FORMAT))
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            str(log_file),
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=3,
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(DETAILED_FORMAT))
        logger.addHandler(file_handler)

    return logger
