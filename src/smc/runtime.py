"""
Runtime capabilities used by generated SMC machine modules.

Generated code subclasses these bases; user code normally only touches the
generated classes and the hook decorators:

    from machines import lock

    @lock.TurnKey.guard
    def key_fits(has_key: bool) -> bool:
        return has_key

    m = lock.Machine.new(lock.Locked)
    m = m.transition(lock.TurnKey)
    assert m.current_state() == lock.Unlocked()

Illegal transitions are rejected at the call boundary: `transition` raises
UnsupportedTransition before any new instance exists.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar

from .core.errors import SmcError

logger = logging.getLogger(__name__)


class MachineRuntimeError(SmcError):
    """Base class for errors raised by generated machines."""

    pass


class UnsupportedTransition(MachineRuntimeError):
    """Raised when an event has no declared transition from the current state."""

    def __init__(self, machine: str, state: State, event: Event):
        self.machine = machine
        self.state = state
        self.event = event
        super().__init__(f"{machine}: no transition from {state!r} on {event!r}")


class NotAnInitialState(MachineRuntimeError):
    """Raised when a machine is started in a state not declared as initial."""

    def __init__(self, machine: str, state: Any):
        self.machine = machine
        self.state = state
        super().__init__(f"{machine}: {state!r} is not an initial state")


class MissingGuard(MachineRuntimeError):
    """Raised when dispatch needs a guard predicate that was never registered."""

    def __init__(self, machine: str, event: str):
        self.machine = machine
        self.event = event
        super().__init__(f"{machine}: no guard registered for event {event}")


class UnknownVariant(MachineRuntimeError):
    """Raised when an instance or tag is not one of the machine's variants."""

    def __init__(self, machine: str, detail: str):
        self.machine = machine
        super().__init__(f"{machine}: unknown variant {detail}")


class _Labeled:
    """A unit value identified by its machine and declared name."""

    __slots__ = ()

    kind: ClassVar[str] = ""
    machine: ClassVar[str] = ""
    name: ClassVar[str] = ""

    def _key(self) -> tuple[str, str, str]:
        return (self.kind, self.machine, self.name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _Labeled):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return self.name

    def __copy__(self) -> _Labeled:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> _Labeled:
        return self


class State(_Labeled):
    """Base of every generated state."""

    __slots__ = ()
    kind = "state"


class InitialState(State):
    """Base of generated states that may start a machine."""

    __slots__ = ()


class Event(_Labeled):
    """
    Base of every generated event.

    Guards and actions are supplied by the application:

        @Coin.guard
        def coin_inserted(coins: int) -> bool:
            return coins > 0

        @Coin.on_action
        def count(log: list[str]) -> None:
            log.append("coin")
    """

    __slots__ = ()
    kind = "event"

    _guard: ClassVar[Callable[..., Any] | None] = None
    _action: ClassVar[Callable[..., Any] | None] = None

    @classmethod
    def guard(cls, fn: Callable[..., Any]) -> Callable[..., Any]:
        """Register the guard predicate of this event. Usable as a decorator."""
        cls._guard = staticmethod(fn)  # type: ignore[assignment]
        return fn

    @classmethod
    def on_action(cls, fn: Callable[..., Any]) -> Callable[..., Any]:
        """Register the action of this event. Usable as a decorator."""
        cls._action = staticmethod(fn)  # type: ignore[assignment]
        return fn

    @classmethod
    def clear_hooks(cls) -> None:
        """Forget the registered guard and action."""
        cls._guard = None
        cls._action = None

    @classmethod
    def is_enabled(cls, *guard_resources: Any) -> bool:
        """Evaluate the guard with the machine's guard resources."""
        if cls._guard is None:
            raise MissingGuard(cls.machine, cls.name)
        return bool(cls._guard(*guard_resources))

    @classmethod
    def action(cls, *action_resources: Any) -> None:
        """Run the action with the machine's action resources. No-op if unset."""
        if cls._action is not None:
            cls._action(*action_resources)


class NoneEvent(Event):
    """Sentinel trigger of machines that have not transitioned yet."""

    __slots__ = ()
    name = "NoneEvent"


NONE_EVENT = NoneEvent()


def _coerce(value: Any) -> Any:
    """Accept a generated class where an instance is expected."""
    if isinstance(value, type) and issubclass(value, _Labeled):
        return value()
    return value


@dataclass(frozen=True)
class Machine:
    """
    An immutable `(state, last-triggering-event)` pair.

    Generated subclasses fill in the class-level tables:

    - `name`: machine name
    - `initial_states`: state classes accepted by `new`
    - `transitions`: `(state class, event class) -> state class`, one entry
      per declared rule
    - `variant_tags`: `(state class, event class) -> tag` for every variant
    """

    state: State
    event: Event = NONE_EVENT

    name: ClassVar[str] = ""
    initial_states: ClassVar[tuple[type[State], ...]] = ()
    transitions: ClassVar[Mapping[tuple[type[State], type[Event]], type[State]]] = {}
    variant_tags: ClassVar[Mapping[tuple[type[State], type[Event]], Enum]] = {}

    @classmethod
    def new(cls, state: Any) -> Machine:
        """Start a machine in one of its initial states."""
        state = _coerce(state)
        if not isinstance(state, InitialState) or type(state) not in cls.initial_states:
            raise NotAnInitialState(cls.name, state)
        return cls(state, NONE_EVENT)

    def current_state(self) -> State:
        return self.state

    def trigger(self) -> Event | None:
        """The event that produced this instance, or None for a fresh machine."""
        if isinstance(self.event, NoneEvent):
            return None
        return self.event

    def can_transition(self, event: Any) -> bool:
        """Check whether `event` is declared from the current state."""
        event = _coerce(event)
        return (type(self.state), type(event)) in self.transitions

    def allowed_events(self) -> list[type[Event]]:
        """Event classes with a declared transition from the current state."""
        current = type(self.state)
        return [event for (state, event) in self.transitions if state is current]

    def transition(self, event: Any) -> Machine:
        """
        Apply an event, returning a new instance in the target state.

        Raises:
            UnsupportedTransition: If no rule covers `(current state, event)`
        """
        event = _coerce(event)
        target = self.transitions.get((type(self.state), type(event)))
        if target is None:
            raise UnsupportedTransition(self.name, self.state, event)
        logger.debug("%s: %r --%r--> %s", self.name, self.state, event, target.name)
        return type(self)(target(), event)

    def as_variant(self) -> Variant:
        """Wrap this instance into its tagged variant."""
        tag = self.variant_tags.get((type(self.state), type(self.event)))
        if tag is None:
            raise UnknownVariant(self.name, f"{self.state!r} by {self.event!r}")
        return Variant(tag, self)


@dataclass(frozen=True)
class Variant:
    """One case of a machine's closed set of `(state, event)` pairs."""

    tag: Enum
    machine: Machine

    def current_state(self) -> State:
        return self.machine.current_state()
