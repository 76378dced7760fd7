"""
Command-line interface for rescuedogs-mcp.
"""

from rescuedogs_mcp.cli.main import cli

__all__ = ["cli"]
