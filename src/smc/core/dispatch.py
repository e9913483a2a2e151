"""
Dispatch synthesis for SMC machines.

Builds one DispatchArm per variant. Terminal-state variants pass through;
non-terminal-state variants get an ordered guard chain of every transition
leaving their state. The first enabled guard wins, so declaration order is
the tie-break between candidates.
"""

from __future__ import annotations

import logging

from . import analyzer, ir

logger = logging.getLogger(__name__)


def candidates_for(spec: ir.MachineSpec, state_name: str) -> list[ir.GuardedTransition]:
    """Guard chain for a state: its outgoing transitions in declaration order."""
    return [
        ir.GuardedTransition(event=t.event, to_state=t.to_state)
        for t in analyzer.transitions_from(spec, state_name)
    ]


def synthesize(spec: ir.MachineSpec, derived: ir.DerivedSets | None = None) -> list[ir.DispatchArm]:
    """
    Build the dispatch table of a machine.

    Arms for terminal states come first, then arms for non-terminal states.
    Within each group states keep their derived order and each state's
    variants keep variant order.

    Args:
        spec: Parsed machine
        derived: Derived sets, computed if not given

    Returns:
        One DispatchArm per variant
    """
    derived = derived or analyzer.analyze(spec)
    arms: list[ir.DispatchArm] = []

    for state in derived.terminal_states:
        for variant in _variants_of(derived, state.name):
            arms.append(ir.DispatchArm(variant=variant, passthrough=True))

    for state in derived.non_terminal_states:
        chain = candidates_for(spec, state.name)
        for variant in _variants_of(derived, state.name):
            arms.append(ir.DispatchArm(variant=variant, passthrough=False, candidates=chain))

    logger.debug("Synthesized %d dispatch arms for %s", len(arms), spec.name)
    return arms


def _variants_of(derived: ir.DerivedSets, state_name: str) -> list[ir.Variant]:
    return [v for v in derived.variants if v.state.name == state_name]
