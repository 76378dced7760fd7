"""
Rich terminal output helpers for CLI.

Renders tool responses as markdown and prints status messages using the
Rich library.
"""

import base64

from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape

from rescuedogs_mcp.core.models import ImageContent
from rescuedogs_mcp.tools.service import ToolResponse

# Console instance for all output
console = Console()

# Diagnostics go to stderr so piped JSON stays clean
err_console = Console(stderr=True)


def print_response(response: ToolResponse, raw: bool = False) -> None:
    """Print the blocks of a tool response in order.

    Args:
        response: Response to print.
        raw: Print text verbatim instead of rendering markdown (used for JSON).
    """
    for block in response.content:
        if isinstance(block, ImageContent):
            size = len(base64.b64decode(block.data))
            console.print(f"[dim]\\[image: {block.mime_type}, {size:,} bytes][/]")
        elif raw:
            console.print(block, markup=False, highlight=False, soft_wrap=True)
        else:
            console.print(Markdown(block))


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[bold red]Error:[/] {escape(message)}")


def print_info(message: str) -> None:
    """Print an info message."""
    err_console.print(f"[cyan]Info:[/] {escape(message)}")
