"""Deployment CLI commands - deploy, render, version."""
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as package_version
from typing import Optional

import typer
from rich.console import Console
from rich.syntax import Syntax

from nxdeploy.cli_support import (
    is_mock,
    load_config,
    print_error,
    print_info,
    print_success,
    setup_file_logging,
)
from nxdeploy.core.errors import DeployerError
from nxdeploy.core.logger import set_verbose

# Module-level console instance (will be set by register function)
console: Console = Console()

RENDER_TARGETS = ("upstream", "api", "site")


def deploy(
    deployment_type: str = typer.Option(..., "--type", "-T", help="Deployment type: proxy, service or node"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be written without touching the host"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Also write logs to this file"),
):
    """Fetch the optional config repository and deploy one instance type.

    Examples:
        nxdeploy deploy -T proxy            # Write proxy configuration
        nxdeploy deploy -T proxy --dry-run  # Preview generated files
        nxdeploy deploy -T service          # Launch the service command
    """
    from nxdeploy.core.orchestrator import DeploymentOrchestrator
    from nxdeploy.core.sink import FileArtifactSink, MemoryArtifactSink
    from nxdeploy.services.git_fetcher import RepositoryFetcher

    if log_file:
        setup_file_logging(log_file=log_file, verbose=verbose)
    set_verbose(verbose)

    mock = dry_run or is_mock()

    try:
        config = load_config()
        sink = MemoryArtifactSink() if mock else FileArtifactSink()
        fetcher = RepositoryFetcher(mock=mock, timeout=config.fetch_timeout or None)
        orchestrator = DeploymentOrchestrator(config, sink, fetcher)
        orchestrator.run(deployment_type, dry_run=mock)
    except DeployerError as e:
        print_error(console, e.message)
        raise typer.Exit(1)

    if mock:
        for path, content in sink.files.items():
            console.print(f"\n[bold]{path}[/bold]", soft_wrap=True)
            console.print(Syntax(content, "nginx", theme="ansi_dark"))

    print_success(console, f"{deployment_type} deployment finished")


def render(
    target: str = typer.Argument(..., help="Artifact to render: upstream, api or site"),
):
    """Print one generated proxy file using the current environment."""
    from nxdeploy.core.sink import MemoryArtifactSink
    from nxdeploy.deploy.proxy import ProxyDeployment
    from nxdeploy.nginx.writer import ConfigBlockWriter

    if target not in RENDER_TARGETS:
        print_error(console, f"Unknown render target '{target}'. Choose one of: {', '.join(RENDER_TARGETS)}")
        raise typer.Exit(1)

    try:
        settings = load_config().proxy.validate()
        writer = ConfigBlockWriter(
            MemoryArtifactSink(),
            ProxyDeployment.cert_location(settings, settings.nginx_root),
        )
        if target == "upstream":
            content = writer.render_upstream(settings.upstream)
        elif target == "api":
            content = writer.render_server_block(ProxyDeployment.api_block(settings))
        else:
            if not settings.site_domain:
                print_info(console, "No site domain configured (NXDEPLOY_SITE_DOMAIN), nothing to render")
                return
            content = writer.render_server_block(ProxyDeployment.site_block(settings))
    except DeployerError as e:
        print_error(console, e.message)
        raise typer.Exit(1)

    typer.echo(content, nl=False)


def version():
    """Show nxdeploy version."""
    try:
        current = package_version("nxdeploy")
    except PackageNotFoundError:
        current = "unknown"
    console.print(f"nxdeploy v{current}")


def register_deploy_commands(app: typer.Typer, shared_console: Console):
    """Register deployment commands with the main Typer app.

    Args:
        app: Main Typer application
        shared_console: Shared Rich console instance
    """
    global console
    console = shared_console

    app.command()(deploy)
    app.command()(render)
    app.command()(version)
