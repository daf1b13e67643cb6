"""addonctl - add-on catalog administration.

Command-line interface for inspecting and managing installed add-ons.
"""

__version__ = "0.1.0"

from cli.addonctl.cli import app, main

__all__ = ["__version__", "app", "main"]
