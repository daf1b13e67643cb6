"""Add-on CLI commands.

Manage installed theme and palette add-ons.
"""

from pathlib import Path

import typer
from rich.table import Table

from cli.addonctl.output import (
    console,
    print_error,
    print_info,
    print_key_value,
    print_resources,
    print_success,
    print_warning,
)

addons_app = typer.Typer(
    name="addons",
    help="Manage installed add-ons.",
)


def get_catalog():
    """Build the catalog from the current configuration."""
    from addons import Catalog
    from addons.config import get_config

    config = get_config()
    settings = config.settings_store()
    return Catalog(
        config.search_paths(),
        settings,
        selected_theme=lambda: settings.get_str("theme", "selected", "") or None,
    )


def get_package(catalog, name: str):
    """Look up a package or exit with an error."""
    package = catalog.get(name)
    if package is None:
        print_error(f"Add-on '{name}' is not installed")
        raise typer.Exit(1)
    return package


def _protection_reason(package, uninstalling: bool) -> str:
    if package.is_default_theme():
        return "it is the default theme"
    if package.is_current_theme():
        return "it provides the theme currently in use"
    if uninstalling:
        return "it is a built-in add-on"
    return "it is already disabled"


@addons_app.command("list")
def list_addons() -> None:
    """List all installed add-ons.

    Example:
        addonctl addons list
    """
    catalog = get_catalog()

    if not len(catalog):
        console.print("[yellow]No add-ons installed[/yellow]")
        console.print("[dim]Install add-ons with: addonctl addons install <archive.zip>[/dim]")
        return

    table = Table(title="Installed Add-ons")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Display Name")
    table.add_column("Enabled", justify="center")
    table.add_column("Built-in", justify="center")
    table.add_column("Themes", justify="right")
    table.add_column("Palettes", justify="right")

    for package in catalog:
        table.add_row(
            package.name,
            package.display_name,
            "[green]yes[/green]" if package.enabled else "[dim]no[/dim]",
            "yes" if package.builtin else "-",
            str(len(package.themes)),
            str(len(package.palettes)),
        )

    console.print(table)
    console.print(f"\n[dim]Total: {len(catalog)} add-ons[/dim]")


@addons_app.command("show")
def show(
    name: str = typer.Argument(..., help="Add-on name"),
) -> None:
    """Show details of an installed add-on.

    Example:
        addonctl addons show my-themes
    """
    catalog = get_catalog()
    package = get_package(catalog, name)

    console.print(f"\n[bold cyan]{package.display_name}[/bold cyan] ({package.name})\n")
    print_key_value("  Path", package.path)
    print_key_value("  Enabled", "yes" if package.enabled else "no")
    print_key_value("  Built-in", "yes" if package.builtin else "no")

    if package.themes:
        console.print("\n[bold]Themes[/bold]")
        for theme_id, path in package.themes.items():
            console.print(f"  - {theme_id}: {path}")

    if package.palettes:
        console.print("\n[bold]Palettes[/bold]")
        for palette_id, path in package.palettes.items():
            console.print(f"  - {palette_id}: {path}")


@addons_app.command("install")
def install(
    archive: Path = typer.Argument(..., help="Path to the add-on .zip archive"),
) -> None:
    """Install an add-on from a zip archive.

    Example:
        addonctl addons install ./my-themes.zip
    """
    from addons import AddonError

    catalog = get_catalog()

    try:
        package = catalog.install_compressed(archive)
    except AddonError as e:
        print_error(f"Failed to install {archive}: {e}")
        raise typer.Exit(1)

    print_success(f"Installed {package.display_name} ({package.name})")
    print_info(f"Location: {package.path}")


@addons_app.command("uninstall")
def uninstall(
    name: str = typer.Argument(..., help="Add-on name to uninstall"),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Skip confirmation",
    ),
) -> None:
    """Uninstall an add-on and delete its files.

    Example:
        addonctl addons uninstall my-themes
    """
    catalog = get_catalog()
    package = get_package(catalog, name)

    if not package.can_be_uninstalled():
        print_error(f"Cannot uninstall '{name}': {_protection_reason(package, uninstalling=True)}")
        raise typer.Exit(1)

    if not yes:
        if not typer.confirm(f"Uninstall {package.display_name} and delete {package.path}?"):
            raise typer.Exit(0)

    try:
        catalog.uninstall_package(package)
    except OSError as e:
        print_error(f"Failed to uninstall '{name}': {e}")
        raise typer.Exit(1)

    print_success(f"Uninstalled: {name}")


@addons_app.command("enable")
def enable(
    name: str = typer.Argument(..., help="Add-on name to enable"),
) -> None:
    """Enable a disabled add-on.

    Example:
        addonctl addons enable my-themes
    """
    catalog = get_catalog()
    package = get_package(catalog, name)

    if package.enabled:
        print_warning(f"Add-on '{name}' is already enabled")
        return

    catalog.enable_package(package, True)
    print_success(f"Enabled add-on: {name}")


@addons_app.command("disable")
def disable(
    name: str = typer.Argument(..., help="Add-on name to disable"),
) -> None:
    """Disable an add-on without uninstalling it.

    Example:
        addonctl addons disable my-themes
    """
    catalog = get_catalog()
    package = get_package(catalog, name)

    if not package.can_be_disabled():
        print_error(f"Cannot disable '{name}': {_protection_reason(package, uninstalling=False)}")
        raise typer.Exit(1)

    catalog.enable_package(package, False)
    print_success(f"Disabled add-on: {name}")


@addons_app.command("palettes")
def palettes() -> None:
    """List the palettes provided by enabled add-ons."""
    catalog = get_catalog()
    print_resources("Palettes", catalog.palettes())


@addons_app.command("themes")
def themes() -> None:
    """List the themes provided by enabled add-ons."""
    catalog = get_catalog()
    print_resources("Themes", catalog.themes())
