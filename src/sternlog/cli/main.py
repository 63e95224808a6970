"""
sternlog CLI - Main entry point
"""

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from sternlog import __version__
from sternlog.core.config.settings import settings
from sternlog.core.logging import get_logger
from sternlog.filtering.namespace import (
    NamespaceFilter,
    build_namespace,
    is_namespace_enabled,
)

# Initialize CLI app
app = typer.Typer(
    name="sternlog",
    help="Structured logging with trace correlation and namespace filtering",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

# Initialize console and logger
console = Console()
logger = get_logger(__name__)


def _version_table() -> Table:
    table = Table(title="sternlog Version Information")
    table.add_column("Component", style="cyan")
    table.add_column("Version", style="green")
    table.add_column("Environment", style="yellow")
    table.add_row("sternlog", __version__, settings.ENVIRONMENT)
    return table


def version_callback(value: bool) -> None:
    """Handle version callback"""
    if value:
        console.print(_version_table())
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show sternlog version and exit",
    ),
) -> None:
    """
    sternlog CLI - inspect logger configuration and namespace filtering

    Run 'sternlog --help' for available commands.
    """


@app.command()
def version() -> None:
    """Show sternlog version information"""
    console.print(_version_table())


@app.command()
def config() -> None:
    """Show the effective logger settings"""
    table = Table(title="sternlog Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for name, value in settings.model_dump().items():
        table.add_row(name, "" if value is None else str(value))

    console.print(table)


@app.command()
def check(
    patterns: str = typer.Argument(
        ..., help="Comma-separated namespace patterns, e.g. 'voice:*,http:*'"
    ),
    component: Optional[str] = typer.Option(None, "--component", help="Component"),
    service: Optional[str] = typer.Option(None, "--service", help="Service name"),
    layer: Optional[str] = typer.Option(None, "--layer", help="Architecture layer"),
    operation: Optional[str] = typer.Option(None, "--operation", help="Operation"),
    domain: Optional[str] = typer.Option(None, "--domain", help="Business domain"),
    integration: Optional[str] = typer.Option(
        None, "--integration", help="External integration"
    ),
) -> None:
    """
    Check whether a component logger would be enabled.

    Exits with code 0 when the namespace is enabled and 1 when it is not.
    """
    metadata = {
        "component": component,
        "service": service,
        "layer": layer,
        "operation": operation,
        "domain": domain,
        "integration": integration,
    }
    namespace = build_namespace(metadata)
    enabled = is_namespace_enabled(namespace, NamespaceFilter().parse(patterns))
    logger.debug("Namespace checked", namespace=namespace, enabled=enabled)

    table = Table(title="Namespace Check")
    table.add_column("Patterns", style="cyan")
    table.add_column("Namespace", style="yellow")
    table.add_column("Enabled")
    table.add_row(
        patterns,
        namespace or "(empty)",
        "[green]yes[/green]" if enabled else "[red]no[/red]",
    )
    console.print(table)

    if not enabled:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
