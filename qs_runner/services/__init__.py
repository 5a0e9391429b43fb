"""Scratch-area artifacts, executor commands and environment snapshots."""
