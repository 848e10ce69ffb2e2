"""Command-line interface for dockstrap."""
