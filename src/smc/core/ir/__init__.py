"""
SMC Intermediate Representation (IR) types.

This package contains all IR type definitions for the SMC DSL.
Types are re-exported from this package so callers can write `ir.MachineSpec`.
"""

# Derived sets and dispatch tables
from .derived import (
    INITIAL_TAG_PREFIX,
    DerivedSets,
    DispatchArm,
    GuardedTransition,
    Variant,
    initial_variant_tag,
    transition_variant_tag,
)

# Source locations
from .location import SourceLocation

# Machine declarations
from .machine import (
    EventDecl,
    InitialStateDecl,
    MachineSpec,
    ResourceParam,
    StateDecl,
    TransitionDecl,
)

# Modules
from .module import MachineModule

__all__ = [
    "INITIAL_TAG_PREFIX",
    "DerivedSets",
    "DispatchArm",
    "EventDecl",
    "GuardedTransition",
    "InitialStateDecl",
    "MachineModule",
    "MachineSpec",
    "ResourceParam",
    "SourceLocation",
    "StateDecl",
    "TransitionDecl",
    "Variant",
    "initial_variant_tag",
    "transition_variant_tag",
]
