"""
Semantic analysis for SMC machines.

Computes the derived sets of a MachineSpec: every state, the states with and
without outgoing transitions, every event, and the deduplicated list of
reachable `(state, producing-event)` variants.

All results are ordered by first appearance in the declaration, so generated
code is reproducible across runs on unchanged input. Identity is by name:
two declarations with the same name are the same state (or event) no matter
where they appear.

Policy: a state is non-terminal only if at least one transition departs from
it. Declaring a state as initial does not make it non-terminal.
"""

from __future__ import annotations

import logging

from . import ir

logger = logging.getLogger(__name__)


def _add_unique_state(states: list[ir.StateDecl], state: ir.StateDecl) -> None:
    if not any(s.name == state.name for s in states):
        states.append(state)


def states(spec: ir.MachineSpec) -> list[ir.StateDecl]:
    """
    Every state of the machine.

    Transition endpoints in declaration order (`from` before `to`), then any
    initial state not seen yet.
    """
    result: list[ir.StateDecl] = []

    for t in spec.transitions:
        _add_unique_state(result, t.from_state)
        _add_unique_state(result, t.to_state)

    for initial in spec.initial_states:
        _add_unique_state(result, initial.state)

    return result


def non_terminal_states(spec: ir.MachineSpec) -> list[ir.StateDecl]:
    """States that are the source of at least one transition."""
    result: list[ir.StateDecl] = []
    for t in spec.transitions:
        _add_unique_state(result, t.from_state)
    return result


def terminal_states(spec: ir.MachineSpec) -> list[ir.StateDecl]:
    """States with no outgoing transition, in `states()` order."""
    departing = {s.name for s in non_terminal_states(spec)}
    return [s for s in states(spec) if s.name not in departing]


def events(spec: ir.MachineSpec) -> list[ir.EventDecl]:
    """One entry per distinct event name, in declaration order."""
    result: list[ir.EventDecl] = []
    for t in spec.transitions:
        if not any(e.name == t.event.name for e in result):
            result.append(t.event)
    return result


def variants(spec: ir.MachineSpec) -> list[ir.Variant]:
    """
    Every distinguishable `(state, producing-event)` pair.

    Initial states come first as `Initial<State>` with no event, then each
    transition target as `<To>By<Event>`. A tag seen before is skipped, so
    transitions sharing `to` and `event` collapse into one variant whatever
    their `from` states are.
    """
    result: list[ir.Variant] = []
    seen: set[str] = set()

    for initial in spec.initial_states:
        tag = ir.initial_variant_tag(initial.name)
        if tag in seen:
            continue
        seen.add(tag)
        result.append(ir.Variant(tag=tag, state=initial.state, event=None))

    for t in spec.transitions:
        tag = ir.transition_variant_tag(t.to_state.name, t.event.name)
        if tag in seen:
            continue
        seen.add(tag)
        result.append(ir.Variant(tag=tag, state=t.to_state, event=t.event))

    return result


def variants_for_state(spec: ir.MachineSpec, state_name: str) -> list[ir.Variant]:
    """The variants whose state is `state_name`, in `variants()` order."""
    return [v for v in variants(spec) if v.state.name == state_name]


def transitions_from(spec: ir.MachineSpec, state_name: str) -> list[ir.TransitionDecl]:
    """Transitions departing `state_name`, in declaration order."""
    return [t for t in spec.transitions if t.from_state.name == state_name]


def reachable_states(spec: ir.MachineSpec) -> list[ir.StateDecl]:
    """
    States reachable from any initial state by following transitions.

    Ordered as `states()`. Empty when the machine has no initial states.
    """
    reached = set(spec.initial_state_names)
    frontier = list(reached)
    while frontier:
        current = frontier.pop()
        for t in transitions_from(spec, current):
            if t.to_state.name not in reached:
                reached.add(t.to_state.name)
                frontier.append(t.to_state.name)
    return [s for s in states(spec) if s.name in reached]


def analyze(spec: ir.MachineSpec) -> ir.DerivedSets:
    """
    Compute all derived sets of a machine.

    Args:
        spec: Parsed machine

    Returns:
        DerivedSets bundle
    """
    derived = ir.DerivedSets(
        machine=spec.name,
        states=states(spec),
        non_terminal_states=non_terminal_states(spec),
        terminal_states=terminal_states(spec),
        events=events(spec),
        variants=variants(spec),
    )
    logger.debug(
        "Analyzed %s: %d states (%d terminal), %d events, %d variants",
        spec.name,
        len(derived.states),
        len(derived.terminal_states),
        len(derived.events),
        len(derived.variants),
    )
    return derived
