#!/usr/bin/env python3
"""nxdeploy CLI - proxy configuration and deployment runner."""

import typer
from rich.console import Console

from nxdeploy.cli_deploy_commands import register_deploy_commands

app = typer.Typer(
    name="nxdeploy",
    help="""nxdeploy - generate proxy configuration and run deployments

Quick start:
  nxdeploy render api             # Preview the API server block
  nxdeploy deploy -T proxy        # Write upstream, API and site configs
  nxdeploy deploy -T service      # Launch the service command
""",
    add_completion=False,
)

console = Console()

register_deploy_commands(app, console)

if __name__ == "__main__":
    app()
