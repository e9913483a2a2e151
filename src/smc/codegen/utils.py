"""
Utility functions for code generation.

Contains naming and parameter rendering helpers.
"""

from __future__ import annotations

import keyword
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from smc.core.ir import MachineSpec, ResourceParam


GENERATED_HEADER = "Generated from DSL - DO NOT EDIT."


def snake_case(name: str) -> str:
    """Convert PascalCase to snake_case."""
    result = []
    for i, char in enumerate(name):
        if char.isupper() and i > 0 and not name[i - 1].isupper():
            result.append("_")
        result.append(char.lower())
    return "".join(result)


def module_name_for(machine: MachineSpec) -> str:
    """Python module name of a generated machine."""
    name = snake_case(machine.name)
    if keyword.iskeyword(name):
        name += "_"
    return name


def render_params(resources: list[ResourceParam]) -> str:
    """Render resources as a parameter list: "a: bool, b: list[int]"."""
    return ", ".join(f"{r.name}: {r.type_annotation}" for r in resources)


def render_args(resources: list[ResourceParam]) -> str:
    """Render resources as positional call arguments: "a, b"."""
    return ", ".join(r.name for r in resources)


def render_tuple(names: list[str]) -> str:
    """Render names as a Python tuple expression."""
    if not names:
        return "()"
    if len(names) == 1:
        return f"({names[0]},)"
    return f"({', '.join(names)})"
