# docindex/cli/commands/__init__.py
"""CLI command implementations, imported lazily by docindex.cli.cli."""
