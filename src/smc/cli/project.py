"""
Project commands for SMC CLI.

Commands operating on an smc.toml project:
- validate: Parse and validate machines
- lint: Extended validation checks
- inspect: Show states, events, variants and transitions
- build: Generate the Python package of machine modules
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

import typer

from smc.cli.utils import print_vscode_parse_error
from smc.cli_ui import (
    display_table,
    print_header,
    print_info,
    print_success,
    print_warning,
)
from smc.codegen.package import PackageGenerator
from smc.core import analyzer, ir
from smc.core.errors import ParseError, SmcError
from smc.core.fileset import discover_sm_files
from smc.core.lint import lint_modules
from smc.core.manifest import MANIFEST_NAME, ProjectManifest, load_manifest
from smc.core.parser import parse_files

logger = logging.getLogger(__name__)

# "file:line:col: message" as produced by the validator
_LOCATED = re.compile(r"^(?P<file>.+?):(?P<line>\d+):(?P<col>\d+): (?P<message>.*)$", re.DOTALL)


def _load_project(manifest: str) -> tuple[Path, ProjectManifest, list[ir.MachineModule]]:
    manifest_path = Path(manifest).resolve()
    mf = load_manifest(manifest_path)
    sm_files = discover_sm_files(mf)
    logger.debug("Discovered %d .sm files under %s", len(sm_files), mf.root)
    modules = parse_files(sm_files)
    return mf.root, mf, modules


def _print_human_diagnostics(errors: list[str], warnings: list[str]) -> None:
    """Print diagnostics in human-readable format."""
    if errors:
        typer.echo("Validation failed:\n", err=True)
        for err in errors:
            typer.echo(f"ERROR: {err}", err=True)

    if warnings:
        typer.echo("Validation warnings:\n", err=False)
        for warn in warnings:
            typer.echo(f"WARNING: {warn}", err=False)

    if not errors and not warnings:
        typer.echo("OK: machines are valid.")


def _vscode_line(message: str, severity: str, root: Path) -> str:
    match = _LOCATED.match(message)
    if not match:
        return f"{MANIFEST_NAME}:1:1: {severity}: {message}"

    path = Path(match["file"])
    try:
        path = path.relative_to(root)
    except ValueError:
        pass
    return f"{path}:{match['line']}:{match['col']}: {severity}: {match['message']}"


def _print_vscode_diagnostics(errors: list[str], warnings: list[str], root: Path) -> None:
    """
    Print diagnostics in VS Code format: file:line:col: severity: message
    """
    for err in errors:
        typer.echo(_vscode_line(err, "error", root), err=True)

    for warn in warnings:
        typer.echo(_vscode_line(warn, "warning", root), err=True)

    if not errors and not warnings:
        typer.echo("::notice: Validation successful")


def _run_lint(manifest: str, format: str, extended: bool) -> None:
    root = Path(manifest).resolve().parent

    try:
        root, _, modules = _load_project(manifest)
        errors, warnings = lint_modules(modules, extended=extended)

        if format == "vscode":
            _print_vscode_diagnostics(errors, warnings, root)
        else:
            _print_human_diagnostics(errors, warnings)

        if errors:
            raise typer.Exit(code=1)

    except ParseError as e:
        if format == "vscode":
            print_vscode_parse_error(e, root)
        else:
            typer.echo(f"Parse error: {e}", err=True)
        raise typer.Exit(code=1)
    except SmcError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


def validate_command(
    manifest: str = typer.Option(MANIFEST_NAME, "--manifest", "-m", help="Path to smc.toml"),
    format: str = typer.Option(
        "human", "--format", "-f", help="Output format: 'human' or 'vscode'"
    ),
) -> None:
    """
    Parse every .sm file of the project and validate its machines.
    """
    _run_lint(manifest, format, extended=False)


def lint_command(
    manifest: str = typer.Option(MANIFEST_NAME, "--manifest", "-m"),
    format: str = typer.Option("human", "--format", "-f", help="Output format"),
) -> None:
    """
    Run extended lint checks (validate + naming conventions).
    """
    _run_lint(manifest, format, extended=True)


def _describe(module: ir.MachineModule, machine: ir.MachineSpec) -> dict[str, Any]:
    derived = analyzer.analyze(machine)
    return {
        "name": machine.name,
        "file": str(module.file),
        "guard_resources": {r.name: r.type_annotation for r in machine.guard_resources},
        "action_resources": {r.name: r.type_annotation for r in machine.action_resources},
        "initial_states": machine.initial_state_names,
        "states": derived.state_names,
        "non_terminal_states": [s.name for s in derived.non_terminal_states],
        "terminal_states": [s.name for s in derived.terminal_states],
        "events": derived.event_names,
        "variants": derived.variant_tags,
        "transitions": [
            {"event": t.event.name, "from": t.from_state.name, "to": t.to_state.name}
            for t in machine.transitions
        ],
    }


def _print_tree(info: dict[str, Any]) -> None:
    print_header(f"⚙ {info['name']}", info["file"])

    def resources(params: dict[str, str]) -> str:
        return ", ".join(f"{name}: {type_}" for name, type_ in params.items()) or "-"

    terminal = set(info["terminal_states"])
    initial = set(info["initial_states"])
    display_table(
        "States",
        ["State", "Initial", "Terminal"],
        [
            [s, "yes" if s in initial else "", "yes" if s in terminal else ""]
            for s in info["states"]
        ],
    )
    display_table(
        "Transitions",
        ["Event", "From", "To"],
        [[t["event"], t["from"], t["to"]] for t in info["transitions"]],
    )
    print_info(f"Guard resources: {resources(info['guard_resources'])}")
    print_info(f"Action resources: {resources(info['action_resources'])}")
    print_info(f"Variants: {', '.join(info['variants'])}")


def inspect_command(
    manifest: str = typer.Option(MANIFEST_NAME, "--manifest", "-m"),
    machine: str | None = typer.Option(None, "--machine", help="Inspect a specific machine"),
    format: str = typer.Option("tree", "--format", "-f", help="Output format: 'tree' or 'json'"),
) -> None:
    """
    Inspect project machines: states, events, variants and transitions.
    """
    try:
        _, _, modules = _load_project(manifest)

        found = [
            _describe(module, spec)
            for module in modules
            for spec in module.machines
            if machine is None or spec.name == machine
        ]
        if machine and not found:
            typer.echo(f"Machine not found: {machine}", err=True)
            raise typer.Exit(code=1)

        if format == "json":
            payload: Any = found[0] if machine else found
            typer.echo(json.dumps(payload, indent=2))
        else:
            for info in found:
                _print_tree(info)

    except SmcError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


def build_command(
    manifest: str = typer.Option(MANIFEST_NAME, "--manifest", "-m"),
    out: str | None = typer.Option(
        None, "--output", "-o", help="Output directory (default: [output] directory)"
    ),
) -> None:
    """
    Generate one Python module per machine into the output package.

    Examples:
        smc build                      # Write to the directory from smc.toml
        smc build --output src/fsm     # Write somewhere else
    """
    try:
        _, mf, modules = _load_project(manifest)

        # Validate before building
        errors, warnings = lint_modules(modules)
        if errors:
            typer.echo("Cannot build; machines have validation errors:", err=True)
            for err in errors:
                typer.echo(f"ERROR: {err}", err=True)
            raise typer.Exit(code=1)

        for warn in warnings:
            logger.warning(warn)
            print_warning(warn)

        output_dir = mf.get_output_path(Path(out) if out else None)
        result = PackageGenerator(modules, output_dir, clean=mf.output.clean).generate()

        for warn in result.warnings:
            print_warning(warn)

        machine_names = result.artifacts.get("machine_names", [])
        print_success(f"Generated {len(machine_names)} machine(s) into {output_dir}")
        for path in result.files_created:
            typer.echo(f"  {path.name}")

    except SmcError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
