"""Configuration commands.

Provides commands to show, create and locate the treeops config file.
"""

from pathlib import Path
from typing import Annotated

import typer

from treeops.core.config import (
    ConfigError,
    TreeOpsConfig,
    config_to_dict,
    load_config_or_default,
    save_config,
)
from treeops.core.paths import get_config_path
from treeops.utils.formatting import console, create_table, print_error, print_info, print_success

app = typer.Typer(
    help="Show and initialize the treeops configuration.",
    invoke_without_command=True,
    no_args_is_help=True,
)

ConfigPathOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Config file path (default: XDG config dir)."),
]


@app.command()
def show(config_path: ConfigPathOption = None) -> None:
    """Show the effective configuration."""
    path = config_path or get_config_path()
    try:
        config = load_config_or_default(path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    source = str(path) if path.exists() else "defaults (no config file)"
    table = create_table(f"Configuration: {source}")
    table.add_column("Setting", style="text")
    table.add_column("Value", style="info")
    for key, value in config_to_dict(config).items():
        table.add_row(key, str(value).lower() if isinstance(value, bool) else str(value))
    console.print(table)


@app.command()
def init(
    config_path: ConfigPathOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a config file with the default settings."""
    path = config_path or get_config_path()

    if path.exists() and not force:
        print_error(f"Config already exists: {path}")
        print_info("Use --force to overwrite.")
        raise typer.Exit(code=1)

    try:
        saved = save_config(TreeOpsConfig(), config_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Config written to {saved}")


@app.command()
def path() -> None:
    """Print the default config file path."""
    typer.echo(str(get_config_path()))
