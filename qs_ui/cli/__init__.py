"""qa-sweep CLI package."""

from qs_ui.cli.main import app, main

__all__ = ["app", "main"]
