"""
Logging configuration for Design Insight.

Analyzers log through ``logging.getLogger(__name__)`` under the
``design_insight`` namespace: DEBUG for per-module progress, WARNING for
skipped or unparsable source units. Terminal output goes through rich.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from .config import AnalysisConfig

ROOT_LOGGER = "design_insight"

# Module analyses may run on a worker pool; file logs name the thread
FILE_LOG_FORMAT = "%(asctime)s - %(threadName)s - %(name)s - %(levelname)s - %(message)s"

VERBOSITY_LEVELS = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure logging with rich handler for colored output.

    Args:
        verbose: Enable DEBUG level logging (per-module progress)
        quiet: Suppress all but ERROR level logging (hides skipped-unit warnings)
        log_file: Optional file path to write logs to

    Returns:
        Configured logger instance for design_insight
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    console = Console(stderr=True)

    # Markup off: messages quote Rust source such as `Vec<[u8; 4]>`
    handlers: list[logging.Handler] = [
        RichHandler(
            console=console,
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            markup=False,
            show_time=True,
            show_path=verbose,
        )
    ]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(file_handler)

    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=handlers)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)

    return logger


def setup_logging_for(config: AnalysisConfig, log_file: Optional[str] = None) -> logging.Logger:
    """Configure logging from the ``verbosity`` of an analysis config."""
    level = VERBOSITY_LEVELS[config.verbosity]
    return setup_logging(
        verbose=level == logging.DEBUG, quiet=level == logging.ERROR, log_file=log_file
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Module name (e.g., 'design_insight.temporal')
              If None, returns the root design_insight logger

    Returns:
        Logger instance
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER)

    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"

    return logging.getLogger(name)
