"""End-to-end tests driving machines compiled from DSL text."""

from pathlib import Path

import pytest

from smc.codegen.loader import load_machine, load_machines
from smc.core.errors import ValidationError
from smc.core.parser import parse_files
from smc.runtime import MissingGuard, NotAnInitialState, UnsupportedTransition

pytestmark = pytest.mark.e2e


@pytest.fixture
def lock(lock_dsl: str):
    return load_machines(lock_dsl, "lock.sm")["Lock"]


@pytest.fixture
def slot(coin_dsl: str):
    return load_machines(coin_dsl, "slot.sm")["Slot"]


class TestLockMachine:
    def test_module_surface(self, lock) -> None:
        assert lock.MACHINE_NAME == "Lock"
        assert lock.STATES == (lock.Locked, lock.Unlocked, lock.Broken)
        assert lock.TERMINAL_STATES == (lock.Broken,)
        assert lock.NON_TERMINAL_STATES == (lock.Locked, lock.Unlocked)
        assert lock.EVENTS == (lock.TurnKey, lock.Break)
        assert [tag.value for tag in lock.VariantTag] == [
            "InitialLocked",
            "InitialUnlocked",
            "InitialBroken",
            "UnlockedByTurnKey",
            "LockedByTurnKey",
            "BrokenByBreak",
        ]

    def test_round_trip(self, lock) -> None:
        for state in (lock.Locked, lock.Unlocked, lock.Broken):
            assert lock.Machine.new(state()).current_state() == state()

    def test_end_to_end(self, lock) -> None:
        m = lock.Machine.new(lock.Locked())

        m = m.transition(lock.TurnKey())
        assert m.current_state() == lock.Unlocked()

        m = m.transition(lock.TurnKey())
        assert m.current_state() == lock.Locked()

        m = m.transition(lock.Break())
        assert m.current_state() == lock.Broken()
        assert m.trigger() == lock.Break()
        assert m.allowed_events() == []

    def test_illegal_transition_is_rejected(self, lock) -> None:
        broken = lock.Machine.new(lock.Broken)

        with pytest.raises(UnsupportedTransition) as exc_info:
            broken.transition(lock.TurnKey)

        assert exc_info.value.state == lock.Broken()
        assert broken.current_state() == lock.Broken()

    def test_variants(self, lock) -> None:
        m = lock.Machine.new(lock.Locked)

        assert m.as_variant().tag is lock.VariantTag.InitialLocked
        assert m.transition(lock.TurnKey).as_variant().tag is lock.VariantTag.UnlockedByTurnKey

    def test_break_from_either_state_shares_variant(self, lock) -> None:
        from_locked = lock.Machine.new(lock.Locked).transition(lock.Break)
        from_unlocked = lock.Machine.new(lock.Unlocked).transition(lock.Break)

        assert from_locked.as_variant().tag is lock.VariantTag.BrokenByBreak
        assert from_unlocked.as_variant().tag is lock.VariantTag.BrokenByBreak
        assert from_locked == from_unlocked

    def test_state_labels_are_per_machine(self, lock, lock_dsl: str) -> None:
        other = load_machines(lock_dsl.replace("Lock {", "Latch {"))["Latch"]

        assert lock.Locked() != other.Locked()
        with pytest.raises(NotAnInitialState):
            lock.Machine.new(other.Locked())

    def test_eval_passes_terminal_variants_through(self, lock) -> None:
        broken = lock.Machine.new(lock.Broken).as_variant()

        assert lock.eval_machine(broken) == broken


class TestGuardedDispatch:
    def test_disabled_guard_leaves_instance_unchanged(self, slot) -> None:
        log: list[str] = []
        slot.Coin.guard(lambda a: a)
        slot.Coin.on_action(lambda log: log.append("coin"))
        variant = slot.Machine.new(slot.Waiting).as_variant()

        result = slot.eval_machine(variant, False, log)

        assert result == variant
        assert log == []

    def test_enabled_guard_transitions_and_runs_action(self, slot) -> None:
        log: list[str] = []
        slot.Coin.guard(lambda a: a)
        slot.Coin.on_action(lambda log: log.append("coin"))
        variant = slot.Machine.new(slot.Waiting).as_variant()

        result = slot.eval_machine(variant, True, log)

        assert result.tag is slot.VariantTag.PaidByCoin
        assert result.current_state() == slot.Paid()
        assert log == ["coin"]

    def test_terminal_variant_ignores_guards(self, slot) -> None:
        slot.Coin.guard(lambda a: a)
        paid = slot.eval_machine(slot.Machine.new(slot.Waiting).as_variant(), True, [])

        assert slot.eval_machine(paid, True, []) == paid

    def test_missing_guard(self, slot) -> None:
        variant = slot.Machine.new(slot.Waiting).as_variant()

        with pytest.raises(MissingGuard):
            slot.eval_machine(variant, True, [])

    def test_loads_are_isolated(self, slot, coin_dsl: str) -> None:
        slot.Coin.guard(lambda a: a)
        fresh = load_machines(coin_dsl)["Slot"]

        with pytest.raises(MissingGuard):
            fresh.Coin.is_enabled(True)


class TestFirstMatchWins:
    DSL = """
    Vending {
        GuardResources { credit: int }
        ActionResources { log: list[str] }
        InitialStates { Ready }
        Refund { Ready => Idle }
        Vend { Ready => Dispensing }
    }
    """

    def test_declaration_order_breaks_ties(self) -> None:
        vending = load_machines(self.DSL)["Vending"]
        vending.Refund.guard(lambda credit: credit > 0)
        vending.Vend.guard(lambda credit: credit > 0)
        log: list[str] = []
        vending.Refund.on_action(lambda log: log.append("refund"))
        vending.Vend.on_action(lambda log: log.append("vend"))

        result = vending.eval_machine(vending.Machine.new(vending.Ready).as_variant(), 5, log)

        assert result.current_state() == vending.Idle()
        assert log == ["refund"]

    def test_later_candidate_fires_when_earlier_is_disabled(self) -> None:
        vending = load_machines(self.DSL)["Vending"]
        vending.Refund.guard(lambda credit: credit < 0)
        vending.Vend.guard(lambda credit: credit > 0)

        result = vending.eval_machine(vending.Machine.new(vending.Ready).as_variant(), 5, [])

        assert result.current_state() == vending.Dispensing()
        assert result.machine.trigger() == vending.Vend()


class TestLoader:
    def test_turnstile_fixture(self, dsl_fixtures_dir: Path) -> None:
        module = parse_files([dsl_fixtures_dir / "turnstile.sm"])[0]
        turnstile = load_machine(module.machines[0], source="turnstile.sm")

        assert turnstile.__name__ == "turn_stile"
        assert turnstile.__spec__.origin == "<smc:TurnStile>"
        source = turnstile.__loader__.get_source("turn_stile")
        assert source.startswith('"""\nTurnStile state machine.')
        assert turnstile.TERMINAL_STATES == (turnstile.OutOfOrder,)
        m = turnstile.Machine.new(turnstile.Closed)
        assert m.transition(turnstile.Coin).transition(turnstile.Jam).current_state() == (
            turnstile.OutOfOrder()
        )

    def test_invalid_machine_is_rejected(self) -> None:
        with pytest.raises(ValidationError, match="used both as a state and an event"):
            load_machines("M { InitialStates { A } Go { A => Go } }")

    def test_conflicting_targets_are_rejected(self) -> None:
        dsl = """
        Door {
            GuardResources { ok: bool }
            InitialStates { Closed }
            Open { Closed => Opened }
            Open { Closed => Jammed }
        }
        """

        with pytest.raises(ValidationError, match="leads to both 'Opened' and 'Jammed'"):
            load_machines(dsl)

    def test_multiple_machines(self) -> None:
        machines = load_machines(
            "First { InitialStates { A } Go { A => B } } Second { InitialStates { X } }"
        )

        assert list(machines) == ["First", "Second"]
        assert machines["Second"].Machine.new(machines["Second"].X).allowed_events() == []
