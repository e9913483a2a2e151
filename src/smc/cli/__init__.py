"""
SMC CLI Package.

- project.py: validate, lint, inspect and build commands
- utils.py: Shared utilities (version, logging, diagnostics)

Entry point: `smc = "smc.cli:main"`.
"""

import typer

from smc.cli.project import build_command, inspect_command, lint_command, validate_command
from smc.cli.utils import configure_logging, get_version, version_callback

__version__ = get_version()

app = typer.Typer(
    help="""SMC – state machine compiler

Compiles .sm state machine definitions into Python modules.

  • Project Operations: validate, lint, inspect, build
    → Operate on the project described by smc.toml
""",
    add_completion=False,
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log pipeline steps to stderr"),
) -> None:
    """SMC CLI main callback for global options."""
    configure_logging(verbose)


app.command(name="validate")(validate_command)
app.command(name="lint")(lint_command)
app.command(name="inspect")(inspect_command)
app.command(name="build")(build_command)


def main() -> None:
    app()


__all__ = [
    "__version__",
    "app",
    "main",
    "get_version",
    "version_callback",
]
