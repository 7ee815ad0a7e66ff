#!/usr/bin/env python3
"""Command line helpers for minor-test configuration."""

from pathlib import Path
from typing import Optional

import typer
import yaml
from rich.console import Console
from rich.syntax import Syntax

from .core.config import ConfigManager
from .exceptions import ConfigurationError

app = typer.Typer(
    name="minor-test",
    help="Functional test lifecycle for browser-driven suites",
    add_completion=False,
    rich_markup_mode="rich",
)
console = Console()


@app.command()
def config(
    init: bool = typer.Option(
        False, "--init",
        help="Initialize a new configuration file"
    ),
    validate: bool = typer.Option(
        False, "--validate",
        help="Validate the configuration file"
    ),
    path: Optional[Path] = typer.Option(
        None, "--path", "-p",
        help="Configuration file (default: test/minor-test.yaml)"
    ),
) -> None:
    """Manage configuration files."""
    config_manager = ConfigManager(path)

    if init:
        config_path = config_manager.create_default_config()
        console.print(f"[green]Default configuration created at:[/green] {config_path}")

    elif validate:
        if config_manager.validate_config():
            console.print(f"[green]Configuration file is valid:[/green] {config_manager.config_path}")
        else:
            console.print(f"[red]Configuration file has errors:[/red] {config_manager.config_path}")
            raise typer.Exit(code=1)
    else:
        console.print("[yellow]Use --init to create a new config or --validate to check an existing one[/yellow]")


@app.command()
def show(
    path: Optional[Path] = typer.Option(
        None, "--path", "-p",
        help="Configuration file (default: test/minor-test.yaml)"
    ),
) -> None:
    """Print the effective configuration, environment overrides included."""
    try:
        effective = ConfigManager(path).load_config()
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)

    rendered = yaml.dump(effective.model_dump(mode="json"), default_flow_style=False, indent=2)
    console.print(Syntax(rendered, "yaml"))


@app.command()
def version() -> None:
    """Show version information."""
    from . import __version__

    console.print(f"minor-test v{__version__}")


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
