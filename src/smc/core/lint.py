from pathlib import Path

from . import ir
from .validator import (
    extended_lint,
    validate_names,
    validate_resources,
    validate_structure,
    validate_transitions,
    validate_variants,
)


def lint_machine(machine: ir.MachineSpec, extended: bool = False) -> tuple[list[str], list[str]]:
    """
    Validate one machine for semantic errors and warnings.

    Performs:
    - Name validation (identifiers, keywords, state/event clashes)
    - Resource validation (duplicates, shadowing, annotation syntax)
    - Variant tag uniqueness
    - One target per (from, event) pair
    - Structural checks (initial states, reachability, duplicate lines)

    Extended mode adds:
    - Naming convention checks (PascalCase)

    Args:
        machine: Parsed machine
        extended: If True, perform extended lint checks

    Returns:
        Tuple of (errors, warnings)
        - errors: List of error messages that must be fixed
        - warnings: List of warnings that should be addressed
    """
    all_errors: list[str] = []
    all_warnings: list[str] = []

    for check in (
        validate_names,
        validate_resources,
        validate_variants,
        validate_transitions,
        validate_structure,
    ):
        errors, warnings = check(machine)
        all_errors.extend(errors)
        all_warnings.extend(warnings)

    if extended:
        all_warnings.extend(extended_lint(machine))

    return all_errors, all_warnings


def lint_modules(
    modules: list[ir.MachineModule], extended: bool = False
) -> tuple[list[str], list[str]]:
    """
    Lint every machine of a project.

    Adds a project-level check: machine names must be unique across files,
    since each one becomes a module of the same generated package.

    Returns:
        Tuple of (errors, warnings)
    """
    all_errors: list[str] = []
    all_warnings: list[str] = []

    if not any(module.machines for module in modules):
        all_warnings.append("No machines defined in project.")

    defined_in: dict[str, Path] = {}
    for module in modules:
        for machine in module.machines:
            if machine.name in defined_in:
                all_errors.append(
                    f"Machine '{machine.name}' is defined more than once "
                    f"(first in {defined_in[machine.name]})"
                )
            else:
                defined_in[machine.name] = module.file

            errors, warnings = lint_machine(machine, extended=extended)
            all_errors.extend(errors)
            all_warnings.extend(warnings)

    return all_errors, all_warnings
