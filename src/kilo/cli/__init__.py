"""Command line entry point and terminal UI."""
