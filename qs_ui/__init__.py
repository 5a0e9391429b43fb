"""Command-line interface for qa-sweep."""
