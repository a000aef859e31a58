"""CLI error handling utilities."""

from collections.abc import Generator
from contextlib import contextmanager

import typer
from rich.console import Console
from rich.markup import escape

from devspace_cache.exceptions import (
    CacheDecodeError,
    CacheIOError,
    GeneratedCacheError,
    ProfileNotFoundError,
)

console = Console()


@contextmanager
def handle_cli_errors(*, debug: bool = False) -> Generator[None, None, None]:
    """Context manager to handle CLI errors gracefully.

    Args:
        debug: If True, re-raise with the full traceback. If False, print a short message.

    """
    try:
        yield
    except (KeyboardInterrupt, SystemExit):
        raise
    except CacheDecodeError as e:
        if debug:
            raise
        console.print(f"[bold red]Invalid Cache File:[/bold red] {escape(str(e))}")
        console.print("Fix the file by hand or delete it to start from an empty cache.")
        raise typer.Exit(1) from e
    except CacheIOError as e:
        if debug:
            raise
        console.print(f"[bold red]File Access Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1) from e
    except ProfileNotFoundError as e:
        if debug:
            raise
        console.print(f"[bold red]Unknown Profile:[/bold red] {escape(str(e))}")
        raise typer.Exit(1) from e
    except GeneratedCacheError as e:
        if debug:
            raise
        console.print(f"[bold red]Cache Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1) from e
