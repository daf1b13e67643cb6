"""addonctl CLI.

Main command-line interface for managing installed add-ons.
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.logging import RichHandler

from addons.config import reload_config
from cli.addonctl.output import console, error_console

app = typer.Typer(
    name="addonctl",
    help="addonctl - manage theme and palette add-ons",
    no_args_is_help=True,
)

# Register sub-apps
from cli.commands.addons import addons_app

app.add_typer(addons_app, name="addons")


@app.callback()
def main_callback(
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to addons.toml (default: search current and parent directories)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging",
    ),
) -> None:
    """Load configuration and set up logging."""
    config = reload_config(config_path)

    level = logging.DEBUG if verbose else getattr(logging, config.logging.level.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=error_console,
                rich_tracebacks=True,
                show_time=False,
                show_path=False,
            )
        ],
        force=True,
    )


@app.command()
def version() -> None:
    """Show addonctl version."""
    from cli.addonctl import __version__

    console.print(f"addonctl v{__version__}")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
