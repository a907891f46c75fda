"""Console and file logging for nxdeploy runs.

Module loggers propagate to the ``nxdeploy`` package logger, which owns the
Rich console handler and, once enabled, the file handler.
"""
import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

console = Console()

PACKAGE_LOGGER = "nxdeploy"
LOG_DIR = Path("/var/log/nxdeploy")
LOG_FILE = LOG_DIR / "nxdeploy.log"
FALLBACK_LOG_FILE = Path("/tmp/nxdeploy/nxdeploy.log")

_file_handler = None


def _package_logger() -> logging.Logger:
    root_logger = logging.getLogger(PACKAGE_LOGGER)
    if not any(isinstance(h, RichHandler) for h in root_logger.handlers):
        handler = RichHandler(console=console, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(handler)
        root_logger.setLevel(logging.INFO)
    return root_logger


def setup_file_logging(log_file: str = None, verbose: bool = False) -> Path:
    """Mirror every nxdeploy log record into a file.

    Args:
        log_file: Path to log file (defaults to /var/log/nxdeploy/nxdeploy.log)
        verbose: Enable debug-level logging

    Returns:
        The file actually written to; /tmp/nxdeploy is used when the
        requested directory cannot be created.
    """
    global _file_handler

    if _file_handler is not None:
        return Path(_file_handler.baseFilename)

    target_log_file = Path(log_file) if log_file else LOG_FILE
    try:
        target_log_file.parent.mkdir(parents=True, exist_ok=True)
    except PermissionError:
        target_log_file = FALLBACK_LOG_FILE
        target_log_file.parent.mkdir(parents=True, exist_ok=True)

    _file_handler = logging.FileHandler(target_log_file)
    _file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s | %(name)s | %(levelname)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root_logger = _package_logger()
    root_logger.addHandler(_file_handler)
    set_verbose(verbose)

    root_logger.info(f"nxdeploy logging initialized: {target_log_file}")
    return target_log_file


def set_verbose(verbose: bool):
    """Switch nxdeploy logging between INFO and DEBUG."""
    _package_logger().setLevel(logging.DEBUG if verbose else logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """Get a module logger that reports through the package handlers.

    Args:
        name: Logger name (typically __name__, inside the nxdeploy package)
    """
    _package_logger()
    return logging.getLogger(name)
