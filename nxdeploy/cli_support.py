"""Shared utilities for nxdeploy CLI modules."""
from __future__ import annotations

import os
from typing import Optional

from rich.console import Console

from nxdeploy.core.config import DeployerConfig, get_config


def is_mock() -> bool:
    """Return True when the CLI runs in mock mode."""
    return os.environ.get("NXDEPLOY_MOCK") == "1"


def load_config() -> DeployerConfig:
    """Read the environment into the process-wide configuration."""
    return get_config()


def setup_file_logging(log_file: Optional[str] = None, verbose: bool = False) -> None:
    """Set up file logging for CLI commands."""
    from nxdeploy.core.logger import setup_file_logging as _setup_file_logging
    _setup_file_logging(log_file=log_file, verbose=verbose)


def print_success(console: Console, message: str, prefix: str = "✓") -> None:
    console.print(f"[green]{prefix}[/green] {message}")


def print_error(console: Console, message: str, prefix: str = "✗") -> None:
    console.print(f"[red]{prefix}[/red] {message}")


def print_info(console: Console, message: str, prefix: str = "ℹ") -> None:
    console.print(f"[cyan]{prefix}[/cyan] {message}")
