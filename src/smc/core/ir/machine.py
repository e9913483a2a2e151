"""
Machine declaration types for SMC IR.

This module contains the typed representation of one parsed machine block:
states, events, resource parameters and transition rules.

Example DSL:
    TurnStile {
        GuardResources { coins: int }
        ActionResources { log: list[str] }
        InitialStates { Locked }

        Coin { Locked => Unlocked }
        Push { Unlocked => Locked }
    }
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .location import SourceLocation


class StateDecl(BaseModel):
    """A named state. Two declarations denote the same state iff names match."""

    name: str
    loc: SourceLocation | None = None

    model_config = ConfigDict(frozen=True)


class EventDecl(BaseModel):
    """A named event. Two declarations denote the same event iff names match."""

    name: str
    loc: SourceLocation | None = None

    model_config = ConfigDict(frozen=True)


class ResourceParam(BaseModel):
    """
    A named, typed value handed to guards or actions.

    Attributes:
        name: Parameter name
        type_annotation: Python annotation text (e.g. "int", "list[str]")
    """

    name: str
    type_annotation: str
    loc: SourceLocation | None = None

    model_config = ConfigDict(frozen=True)


class TransitionDecl(BaseModel):
    """
    A single `event: from -> to` rule.

    A DSL line `Locked, Unlocked => Broken` inside the `Break` block produces
    two TransitionDecls sharing the event and target.
    """

    event: EventDecl
    from_state: StateDecl
    to_state: StateDecl
    loc: SourceLocation | None = None

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.event.name}: {self.from_state.name} => {self.to_state.name}"


class InitialStateDecl(BaseModel):
    """A state that may be used to start the machine."""

    name: str
    loc: SourceLocation | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def state(self) -> StateDecl:
        """The state this declaration refers to."""
        return StateDecl(name=self.name, loc=self.loc)


class MachineSpec(BaseModel):
    """
    One complete machine definition.

    Attributes:
        name: Machine name (becomes the generated module's subject)
        transitions: Transition rules in declaration order
        initial_states: States legal as a start value, in declaration order
        guard_resources: Positional parameters of every guard predicate
        action_resources: Positional parameters of every action
    """

    name: str
    transitions: list[TransitionDecl] = Field(default_factory=list)
    initial_states: list[InitialStateDecl] = Field(default_factory=list)
    guard_resources: list[ResourceParam] = Field(default_factory=list)
    action_resources: list[ResourceParam] = Field(default_factory=list)
    loc: SourceLocation | None = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _require_content(self) -> MachineSpec:
        if not self.transitions and not self.initial_states:
            raise ValueError(f"Machine '{self.name}' needs at least one transition or initial state")
        return self

    @property
    def guard_names(self) -> list[str]:
        """Names of the guard resource parameters, in order."""
        return [r.name for r in self.guard_resources]

    @property
    def action_names(self) -> list[str]:
        """Names of the action resource parameters, in order."""
        return [r.name for r in self.action_resources]

    @property
    def initial_state_names(self) -> list[str]:
        return [i.name for i in self.initial_states]

    def is_initial(self, state_name: str) -> bool:
        """Check whether a state is declared as an initial state."""
        return state_name in self.initial_state_names
