"""
CLI entry point for running rescuedogs_mcp as a module.

Usage: python -m rescuedogs_mcp [OPTIONS] COMMAND [ARGS]...
"""

from rescuedogs_mcp.cli.main import cli

if __name__ == "__main__":
    cli()
