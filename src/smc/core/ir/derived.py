"""
Derived types for SMC IR.

These are pure functions of a MachineSpec: the analyzer computes them and the
dispatch synthesizer and emitter consume them. None of them is parsed.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .machine import EventDecl, StateDecl

INITIAL_TAG_PREFIX = "Initial"


def initial_variant_tag(state_name: str) -> str:
    """Tag of the variant produced by starting the machine in `state_name`."""
    return f"{INITIAL_TAG_PREFIX}{state_name}"


def transition_variant_tag(state_name: str, event_name: str) -> str:
    """Tag of the variant produced by entering `state_name` through `event_name`."""
    return f"{state_name}By{event_name}"


class Variant(BaseModel):
    """
    A distinguishable `(state, producing-event)` pair.

    Attributes:
        tag: `Initial<State>` or `<State>By<Event>`
        state: The state the machine is in
        event: The event that produced it, or None for the "no event" sentinel
    """

    tag: str
    state: StateDecl
    event: EventDecl | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_initial(self) -> bool:
        return self.event is None

    @property
    def event_name(self) -> str | None:
        return self.event.name if self.event else None


class DerivedSets(BaseModel):
    """
    Every collection the analyzer derives from one machine.

    All lists are ordered by first appearance in the declaration.
    """

    machine: str
    states: list[StateDecl] = Field(default_factory=list)
    non_terminal_states: list[StateDecl] = Field(default_factory=list)
    terminal_states: list[StateDecl] = Field(default_factory=list)
    events: list[EventDecl] = Field(default_factory=list)
    variants: list[Variant] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def state_names(self) -> list[str]:
        return [s.name for s in self.states]

    @property
    def event_names(self) -> list[str]:
        return [e.name for e in self.events]

    @property
    def variant_tags(self) -> list[str]:
        return [v.tag for v in self.variants]

    def is_terminal(self, state_name: str) -> bool:
        """Check whether a state has no outgoing transition."""
        return any(s.name == state_name for s in self.terminal_states)


class GuardedTransition(BaseModel):
    """One candidate in a dispatch arm's guard chain."""

    event: EventDecl
    to_state: StateDecl

    model_config = ConfigDict(frozen=True)


class DispatchArm(BaseModel):
    """
    How the dispatch function handles one variant.

    A pass-through arm returns the instance re-tagged into its own variant.
    Otherwise candidates are tried in order and the first enabled one fires.
    """

    variant: Variant
    passthrough: bool
    candidates: list[GuardedTransition] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)
