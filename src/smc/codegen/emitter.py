"""
Python source emission for SMC machines.

Renders one self-contained module per machine from its MachineSpec, derived
sets and dispatch arms. Emission is pure: the same input always yields the
same text.

Generated module layout:
- one State subclass per state, one Event subclass per event
- STATES / NON_TERMINAL_STATES / TERMINAL_STATES / EVENTS tuples
- VariantTag enum with exactly the derived variants
- Machine class with the transition and variant tables
- eval_machine(variant, *guard_resources, *action_resources)
"""

from __future__ import annotations

import logging
from textwrap import dedent

from smc.core import analyzer, dispatch, ir

from .utils import GENERATED_HEADER, render_args, render_params, render_tuple

logger = logging.getLogger(__name__)

INDENT = "    "

RUNTIME_IMPORTS = dedent("""
    from __future__ import annotations

    from enum import Enum as _Enum

    from smc.runtime import Event as _Event
    from smc.runtime import InitialState as _InitialState
    from smc.runtime import Machine as _Machine
    from smc.runtime import NoneEvent as _NoneEvent
    from smc.runtime import State as _State
    from smc.runtime import UnknownVariant as _UnknownVariant
    from smc.runtime import Variant as _Variant
""").strip()


def _header(spec: ir.MachineSpec, source: str | None) -> list[str]:
    lines = ['"""', f"{spec.name} state machine."]
    if source:
        lines.append(f"Source: {source}")
    lines.extend([GENERATED_HEADER, '"""', "", RUNTIME_IMPORTS])
    lines.extend(["", "", f'MACHINE_NAME = "{spec.name}"'])
    return lines


def _labeled_class(name: str, base: str) -> list[str]:
    return [
        "",
        "",
        f"class {name}({base}):",
        f"{INDENT}__slots__ = ()",
        f"{INDENT}machine = MACHINE_NAME",
        f'{INDENT}name = "{name}"',
    ]


def _emit_states(spec: ir.MachineSpec, derived: ir.DerivedSets) -> list[str]:
    lines: list[str] = []
    for state in derived.states:
        base = "_InitialState" if spec.is_initial(state.name) else "_State"
        lines.extend(_labeled_class(state.name, base))
    return lines


def _emit_events(derived: ir.DerivedSets) -> list[str]:
    lines: list[str] = []
    for event in derived.events:
        lines.extend(_labeled_class(event.name, "_Event"))
    return lines


def _emit_collections(derived: ir.DerivedSets) -> list[str]:
    non_terminal = [s.name for s in derived.non_terminal_states]
    terminal = [s.name for s in derived.terminal_states]
    return [
        "",
        "",
        f"STATES = {render_tuple(derived.state_names)}",
        f"NON_TERMINAL_STATES = {render_tuple(non_terminal)}",
        f"TERMINAL_STATES = {render_tuple(terminal)}",
        f"EVENTS = {render_tuple(derived.event_names)}",
    ]


def _emit_variant_tag(spec: ir.MachineSpec, derived: ir.DerivedSets) -> list[str]:
    lines = [
        "",
        "",
        "class VariantTag(str, _Enum):",
        f'{INDENT}"""Every reachable (state, event) pair of {spec.name}."""',
        "",
    ]
    for variant in derived.variants:
        lines.append(f'{INDENT}{variant.tag} = "{variant.tag}"')
    return lines


def _variant_key(variant: ir.Variant) -> str:
    event = variant.event_name or "_NoneEvent"
    return f"({variant.state.name}, {event})"


def _emit_machine_class(spec: ir.MachineSpec, derived: ir.DerivedSets) -> list[str]:
    lines = [
        "",
        "",
        "class Machine(_Machine):",
        f'{INDENT}"""A {spec.name} instance: an immutable (state, trigger) pair."""',
        "",
        f"{INDENT}name = MACHINE_NAME",
        f"{INDENT}initial_states = {render_tuple(spec.initial_state_names)}",
        f"{INDENT}transitions = {{",
    ]
    for t in spec.transitions:
        lines.append(f"{INDENT * 2}({t.from_state.name}, {t.event.name}): {t.to_state.name},")
    lines.append(f"{INDENT}}}")
    lines.append(f"{INDENT}variant_tags = {{")
    for variant in derived.variants:
        lines.append(f"{INDENT * 2}{_variant_key(variant)}: VariantTag.{variant.tag},")
    lines.append(f"{INDENT}}}")
    return lines


def _emit_arm(arm: ir.DispatchArm, guard_args: str, action_args: str) -> list[str]:
    lines = [f"{INDENT}if tag is VariantTag.{arm.variant.tag}:"]
    body = INDENT * 2
    for candidate in arm.candidates:
        event = candidate.event.name
        lines.extend(
            [
                f"{body}if {event}.is_enabled({guard_args}):",
                f"{body}{INDENT}{event}.action({action_args})",
                f"{body}{INDENT}return machine.transition({event}()).as_variant()",
            ]
        )
    lines.append(f"{body}return machine.as_variant()")
    return lines


def _emit_eval(spec: ir.MachineSpec, arms: list[ir.DispatchArm]) -> list[str]:
    params = ["variant: _Variant"]
    if spec.guard_resources:
        params.append(render_params(spec.guard_resources))
    if spec.action_resources:
        params.append(render_params(spec.action_resources))
    guard_args = render_args(spec.guard_resources)
    action_args = render_args(spec.action_resources)

    lines = [
        "",
        "",
        f"def eval_machine({', '.join(params)}) -> _Variant:",
        f'{INDENT}"""',
        f"{INDENT}Fire the first enabled transition of the current variant.",
        "",
        f"{INDENT}Guards are tried in declaration order. Terminal variants and",
        f"{INDENT}variants with no enabled guard are returned unchanged.",
        f'{INDENT}"""',
        f"{INDENT}tag = variant.tag",
        f"{INDENT}machine = variant.machine",
    ]
    for arm in arms:
        lines.extend(_emit_arm(arm, guard_args, action_args))
    lines.append(f"{INDENT}raise _UnknownVariant(MACHINE_NAME, str(tag))")
    return lines


def _emit_all(derived: ir.DerivedSets) -> list[str]:
    names = [
        "MACHINE_NAME",
        *derived.state_names,
        *derived.event_names,
        "STATES",
        "NON_TERMINAL_STATES",
        "TERMINAL_STATES",
        "EVENTS",
        "VariantTag",
        "Machine",
        "eval_machine",
    ]
    lines = ["", "", "__all__ = ["]
    lines.extend(f'{INDENT}"{name}",' for name in names)
    lines.append("]")
    return lines


def emit_machine(
    spec: ir.MachineSpec,
    derived: ir.DerivedSets | None = None,
    arms: list[ir.DispatchArm] | None = None,
    source: str | None = None,
) -> str:
    """
    Render the Python module of one machine.

    Args:
        spec: Parsed machine
        derived: Derived sets, computed if not given
        arms: Dispatch arms, synthesized if not given
        source: Optional DSL file name recorded in the module docstring

    Returns:
        Module source text ending with a newline
    """
    derived = derived or analyzer.analyze(spec)
    arms = arms if arms is not None else dispatch.synthesize(spec, derived)

    lines = _header(spec, source)
    lines.extend(_emit_states(spec, derived))
    lines.extend(_emit_events(derived))
    lines.extend(_emit_collections(derived))
    lines.extend(_emit_variant_tag(spec, derived))
    lines.extend(_emit_machine_class(spec, derived))
    lines.extend(_emit_eval(spec, arms))
    lines.extend(_emit_all(derived))

    logger.debug("Emitted %d lines for machine %s", len(lines), spec.name)
    return "\n".join(lines) + "\n"


def emit_package_init(module_names: list[str]) -> str:
    """Render the `__init__.py` importing every generated machine module."""
    lines = ['"""', "Generated state machines.", GENERATED_HEADER, '"""']
    if module_names:
        lines.extend(["", f"from . import {', '.join(module_names)}"])
    lines.extend(["", "__all__ = ["])
    lines.extend(f'{INDENT}"{name}",' for name in module_names)
    lines.append("]")
    return "\n".join(lines) + "\n"
