"""
Semantic validation for SMC machines.

The parser accepts any identifier as a state, event or resource name. These
checks reject machines whose names would make the generated Python module
invalid or ambiguous, and collect quality warnings for `smc lint`.
"""

import ast
import keyword
from pathlib import Path

from . import analyzer, ir
from .errors import make_validation_error

# =============================================================================
# Validation Constants
# =============================================================================

# Module-level names every generated machine module binds
GENERATED_NAMES = frozenset(
    {
        "MACHINE_NAME",
        "STATES",
        "NON_TERMINAL_STATES",
        "TERMINAL_STATES",
        "EVENTS",
        "VariantTag",
        "Machine",
        "eval_machine",
    }
)

# Local names of the generated eval_machine function
DISPATCH_LOCALS = frozenset({"variant", "tag", "machine"})


def _where(loc: ir.SourceLocation | None) -> str:
    return f"{loc}: " if loc else ""


def _check_identifier(kind: str, name: str, loc: ir.SourceLocation | None) -> list[str]:
    """Errors for a name that cannot be bound in the generated module."""
    errors = []
    if not name.isidentifier():
        errors.append(f"{_where(loc)}{kind} '{name}' is not a valid Python identifier")
    elif keyword.iskeyword(name):
        errors.append(f"{_where(loc)}{kind} '{name}' is a Python keyword")
    elif name.startswith("_"):
        errors.append(f"{_where(loc)}{kind} '{name}' must not start with an underscore")
    return errors


def validate_names(machine: ir.MachineSpec) -> tuple[list[str], list[str]]:
    """
    Validate machine, state and event names.

    Checks:
    - Names are usable Python identifiers and not keywords
    - No state or event shadows a generated module name
    - No name is used both as a state and an event

    Returns:
        Tuple of (errors, warnings)
    """
    errors: list[str] = []
    warnings: list[str] = []

    errors.extend(_check_identifier("Machine", machine.name, machine.loc))

    state_names = set()
    for state in analyzer.states(machine):
        state_names.add(state.name)
        errors.extend(_check_identifier("State", state.name, state.loc))
        if state.name in GENERATED_NAMES:
            errors.append(
                f"{_where(state.loc)}State '{state.name}' clashes with a generated name"
            )

    for event in analyzer.events(machine):
        errors.extend(_check_identifier("Event", event.name, event.loc))
        if event.name in GENERATED_NAMES:
            errors.append(
                f"{_where(event.loc)}Event '{event.name}' clashes with a generated name"
            )
        if event.name in state_names:
            errors.append(
                f"{_where(event.loc)}'{event.name}' is used both as a state and an event"
            )

    return errors, warnings


def validate_resources(machine: ir.MachineSpec) -> tuple[list[str], list[str]]:
    """
    Validate guard and action resource parameters.

    Checks:
    - Each name appears once across both lists
    - No name shadows a state, an event or a name the dispatch function uses
    - Type annotations are valid Python expressions

    Returns:
        Tuple of (errors, warnings)
    """
    errors: list[str] = []
    warnings: list[str] = []

    taken = {s.name for s in analyzer.states(machine)} | {e.name for e in analyzer.events(machine)}
    seen: set[str] = set()

    for resource in [*machine.guard_resources, *machine.action_resources]:
        where = _where(resource.loc)
        errors.extend(_check_identifier("Resource", resource.name, resource.loc))

        if resource.name in seen:
            errors.append(f"{where}Resource '{resource.name}' is declared more than once")
        seen.add(resource.name)

        if resource.name in taken:
            errors.append(
                f"{where}Resource '{resource.name}' has the same name as a state or event"
            )
        elif resource.name in DISPATCH_LOCALS or resource.name in GENERATED_NAMES:
            errors.append(f"{where}Resource '{resource.name}' clashes with a generated name")

        try:
            ast.parse(resource.type_annotation, mode="eval")
        except SyntaxError:
            errors.append(
                f"{where}Resource '{resource.name}' has an invalid type "
                f"'{resource.type_annotation}'"
            )

    return errors, warnings


def validate_variants(machine: ir.MachineSpec) -> tuple[list[str], list[str]]:
    """
    Validate that every variant tag names exactly one (state, event) pair.

    `XBy` entered by `Y` and `X` entered by `ByY` would both be tagged
    `XByByY`. Such machines are rejected.

    Returns:
        Tuple of (errors, warnings)
    """
    errors: list[str] = []
    warnings: list[str] = []

    owners: dict[str, tuple[str, str | None]] = {}
    for initial in machine.initial_states:
        owners.setdefault(ir.initial_variant_tag(initial.name), (initial.name, None))

    for t in machine.transitions:
        tag = ir.transition_variant_tag(t.to_state.name, t.event.name)
        pair = (t.to_state.name, t.event.name)
        owner = owners.setdefault(tag, pair)
        if owner != pair:
            errors.append(
                f"{_where(t.loc)}Variant tag '{tag}' is ambiguous: "
                f"it names both {owner[0]} by {owner[1] or 'start'} "
                f"and {pair[0]} by {pair[1]}"
            )

    return errors, warnings


def validate_transitions(machine: ir.MachineSpec) -> tuple[list[str], list[str]]:
    """
    Validate that each `(from, event)` pair leads to a single target.

    The generated transition table holds one entry per pair, so
    `Open { Closed => Opened }` and `Open { Closed => Jammed }` cannot both
    be honoured. Repeating the same line is only a structure warning.

    Returns:
        Tuple of (errors, warnings)
    """
    errors: list[str] = []
    warnings: list[str] = []

    targets: dict[tuple[str, str], str] = {}
    for t in machine.transitions:
        key = (t.from_state.name, t.event.name)
        target = targets.setdefault(key, t.to_state.name)
        if target != t.to_state.name:
            errors.append(
                f"{_where(t.loc)}Event '{t.event.name}' from '{t.from_state.name}' "
                f"leads to both '{target}' and '{t.to_state.name}'"
            )

    return errors, warnings


def validate_structure(machine: ir.MachineSpec) -> tuple[list[str], list[str]]:
    """
    Structural warnings.

    Checks:
    - The machine declares at least one initial state
    - Every state is reachable from an initial state
    - No transition line is declared twice

    Returns:
        Tuple of (errors, warnings)
    """
    errors: list[str] = []
    warnings: list[str] = []

    if not machine.initial_states:
        warnings.append(
            f"Machine '{machine.name}' has no initial states and cannot be instantiated"
        )
    else:
        reachable = {s.name for s in analyzer.reachable_states(machine)}
        unreachable = [s.name for s in analyzer.states(machine) if s.name not in reachable]
        if unreachable:
            warnings.append(
                f"Machine '{machine.name}' has states unreachable from any initial state: "
                f"{', '.join(unreachable)}"
            )

    seen: set[tuple[str, str, str]] = set()
    for t in machine.transitions:
        key = (t.event.name, t.from_state.name, t.to_state.name)
        if key in seen:
            warnings.append(f"{_where(t.loc)}Duplicate transition '{t}'")
        seen.add(key)

    return errors, warnings


def extended_lint(machine: ir.MachineSpec) -> list[str]:
    """
    Extended lint rules for naming conventions.

    Returns:
        List of warning messages
    """
    warnings = []

    def is_pascal(name: str) -> bool:
        return name[:1].isupper() and "_" not in name

    if not is_pascal(machine.name):
        warnings.append(f"Machine '{machine.name}' should use PascalCase naming")

    for state in analyzer.states(machine):
        if not is_pascal(state.name):
            warnings.append(
                f"Machine '{machine.name}' state '{state.name}' should use PascalCase naming"
            )

    for event in analyzer.events(machine):
        if not is_pascal(event.name):
            warnings.append(
                f"Machine '{machine.name}' event '{event.name}' should use PascalCase naming"
            )

    return warnings


def validate_machine(machine: ir.MachineSpec) -> None:
    """
    Reject a machine that would generate invalid Python.

    Raises:
        ValidationError: Listing every problem found, located at the machine
    """
    errors: list[str] = []
    for check in (validate_names, validate_resources, validate_variants, validate_transitions):
        check_errors, _ = check(machine)
        errors.extend(check_errors)

    if errors:
        loc = machine.loc
        raise make_validation_error(
            "\n".join(errors),
            file=Path(loc.file) if loc else None,
            line=loc.line if loc else None,
            column=loc.column if loc else None,
            machine=machine.name,
        )
