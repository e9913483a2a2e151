"""
SMC CLI Utilities.

Shared utility functions used across CLI modules.
"""

import logging
import platform
from pathlib import Path

import typer

from smc.core.errors import ParseError

__version__ = "0.1.0"


def get_version() -> str:
    """Get SMC version from package metadata."""
    try:
        from importlib.metadata import version

        return version("smc")
    except Exception:
        return __version__


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        smc_version = get_version()
        python_version = platform.python_version()
        python_impl = platform.python_implementation()

        import smc

        install_location = Path(smc.__file__).parent

        typer.echo(f"smc {smc_version}")
        typer.echo(f"Python {python_version} ({python_impl})")
        typer.echo(f"Installed at {install_location}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Send library debug records to stderr when --verbose is given."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )


def print_vscode_parse_error(error: ParseError, root: Path) -> None:
    """Print parse error in VS Code format with location info."""
    if error.context:
        try:
            rel_path = Path(error.context.file).relative_to(root)
        except ValueError:
            rel_path = Path(error.context.file)

        line = error.context.line or 1
        col = error.context.column or 1
        typer.echo(f"{rel_path}:{line}:{col}: error: {error.message}", err=True)
    else:
        typer.echo(f"::error: {error.message}", err=True)
