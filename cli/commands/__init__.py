"""CLI command modules for addonctl."""

from cli.commands.addons import addons_app

__all__ = ["addons_app"]
