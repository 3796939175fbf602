# docindex/cli/__init__.py
from docindex.cli.cli import app

__all__ = ["app"]
