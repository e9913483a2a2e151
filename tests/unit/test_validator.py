"""Tests for machine validation and lint."""

from pathlib import Path

import pytest

from smc.core import ir
from smc.core.errors import ValidationError
from smc.core.lint import lint_machine, lint_modules
from smc.core.parser import parse_text
from smc.core.validator import (
    extended_lint,
    validate_machine,
    validate_names,
    validate_resources,
    validate_structure,
    validate_transitions,
    validate_variants,
)


def machine(text: str) -> ir.MachineSpec:
    return parse_text(text, "test.sm").machines[0]


class TestValidateNames:
    def test_valid_machine(self, lock_spec: ir.MachineSpec) -> None:
        assert validate_names(lock_spec) == ([], [])

    def test_state_and_event_clash(self) -> None:
        errors, _ = validate_names(machine("M { InitialStates { A } Go { A => Go } }"))

        assert len(errors) == 1
        assert "'Go' is used both as a state and an event" in errors[0]
        assert errors[0].startswith("test.sm:1:")

    def test_python_keyword(self) -> None:
        errors, _ = validate_names(machine("M { InitialStates { None } Go { None => pass } }"))

        assert any("State 'None' is a Python keyword" in e for e in errors)
        assert any("State 'pass' is a Python keyword" in e for e in errors)

    def test_keyword_machine_name(self) -> None:
        errors, _ = validate_names(machine("class { InitialStates { A } }"))

        assert any("Machine 'class' is a Python keyword" in e for e in errors)

    def test_generated_name_clash(self) -> None:
        errors, _ = validate_names(machine("M { InitialStates { Machine } VariantTag { Machine => B } }"))

        assert any("State 'Machine' clashes with a generated name" in e for e in errors)
        assert any("Event 'VariantTag' clashes with a generated name" in e for e in errors)

    def test_leading_underscore(self) -> None:
        errors, _ = validate_names(machine("M { InitialStates { _Hidden } }"))

        assert any("must not start with an underscore" in e for e in errors)


class TestValidateResources:
    def test_valid_resources(self, coin_spec: ir.MachineSpec) -> None:
        assert validate_resources(coin_spec) == ([], [])

    def test_duplicate_across_lists(self) -> None:
        errors, _ = validate_resources(
            machine("M { GuardResources { a: int } ActionResources { a: str } Go { X => Y } }")
        )

        assert errors == ["test.sm:1:49: Resource 'a' is declared more than once"]

    def test_resource_named_like_state(self) -> None:
        errors, _ = validate_resources(machine("M { GuardResources { Y: int } Go { X => Y } }"))

        assert any("has the same name as a state or event" in e for e in errors)

    def test_resource_named_like_dispatch_local(self) -> None:
        errors, _ = validate_resources(machine("M { GuardResources { tag: int } Go { X => Y } }"))

        assert any("Resource 'tag' clashes with a generated name" in e for e in errors)

    def test_invalid_annotation(self) -> None:
        errors, _ = validate_resources(machine("M { GuardResources { a: int str } Go { X => Y } }"))

        assert any("has an invalid type 'int str'" in e for e in errors)


class TestValidateVariants:
    def test_unique_tags(self, lock_spec: ir.MachineSpec) -> None:
        assert validate_variants(lock_spec) == ([], [])

    def test_ambiguous_tag(self) -> None:
        errors, _ = validate_variants(machine("M { Y { A => XBy } ByY { A => X } }"))

        assert len(errors) == 1
        assert "Variant tag 'XByByY' is ambiguous" in errors[0]

    def test_initial_tag_collision(self) -> None:
        errors, _ = validate_variants(machine("M { InitialStates { AByGo } Go { B => InitialA } }"))

        assert len(errors) == 1
        assert errors[0].endswith(
            "Variant tag 'InitialAByGo' is ambiguous: "
            "it names both AByGo by start and InitialA by Go"
        )


class TestValidateTransitions:
    def test_single_target_per_pair(self, lock_spec: ir.MachineSpec) -> None:
        assert validate_transitions(lock_spec) == ([], [])

    def test_conflicting_targets(self) -> None:
        errors, _ = validate_transitions(
            machine(
                "Door { InitialStates { Closed } "
                "Open { Closed => Opened } Open { Closed => Jammed } }"
            )
        )

        assert len(errors) == 1
        assert errors[0].startswith("test.sm:1:")
        assert errors[0].endswith(
            "Event 'Open' from 'Closed' leads to both 'Opened' and 'Jammed'"
        )

    def test_repeated_line_is_not_an_error(self) -> None:
        errors, _ = validate_transitions(machine("M { InitialStates { A } Go { A => B, A => B } }"))

        assert errors == []

    def test_validate_machine_rejects_conflict(self) -> None:
        with pytest.raises(ValidationError, match="leads to both"):
            validate_machine(machine("M { InitialStates { A } Go { A => B } Go { A => C } }"))


class TestValidateStructure:
    def test_no_initial_states(self) -> None:
        _, warnings = validate_structure(machine("M { Go { A => B } }"))

        assert warnings == ["Machine 'M' has no initial states and cannot be instantiated"]

    def test_unreachable_states(self) -> None:
        _, warnings = validate_structure(machine("M { InitialStates { A } Go { A => B, C => D } }"))

        assert warnings == [
            "Machine 'M' has states unreachable from any initial state: C, D"
        ]

    def test_duplicate_transition(self) -> None:
        _, warnings = validate_structure(machine("M { InitialStates { A } Go { A => B, A => B } }"))

        assert len(warnings) == 1
        assert "Duplicate transition 'Go: A => B'" in warnings[0]

    def test_clean_machine(self, lock_spec: ir.MachineSpec) -> None:
        assert validate_structure(lock_spec) == ([], [])


class TestExtendedLint:
    def test_naming_conventions(self) -> None:
        warnings = extended_lint(machine("my_machine { InitialStates { idle } go { idle => Busy } }"))

        assert "Machine 'my_machine' should use PascalCase naming" in warnings
        assert "Machine 'my_machine' state 'idle' should use PascalCase naming" in warnings
        assert "Machine 'my_machine' event 'go' should use PascalCase naming" in warnings
        assert not any("'Busy'" in w for w in warnings)


class TestValidateMachine:
    def test_valid_machine_passes(self, lock_spec: ir.MachineSpec) -> None:
        validate_machine(lock_spec)

    def test_raises_with_every_error(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_machine(machine("M { GuardResources { A: int } InitialStates { A } A { A => B } }"))

        error = exc_info.value
        assert "used both as a state and an event" in error.message
        assert "same name as a state or event" in error.message
        assert error.context is not None
        assert error.context.machine == "M"
        assert error.context.file == Path("test.sm")

    def test_warnings_do_not_raise(self) -> None:
        validate_machine(machine("M { Go { A => B } }"))


class TestLint:
    def test_lint_machine_collects_everything(self) -> None:
        errors, warnings = lint_machine(machine("M { Go { A => Go } }"), extended=True)

        assert any("used both as a state and an event" in e for e in errors)
        assert any("no initial states" in w for w in warnings)

    def test_extended_only_when_requested(self) -> None:
        spec = machine("M { InitialStates { idle } }")

        _, basic = lint_machine(spec)
        _, extended = lint_machine(spec, extended=True)

        assert basic == []
        assert extended == ["Machine 'M' state 'idle' should use PascalCase naming"]

    def test_duplicate_machine_names_across_files(self) -> None:
        first = parse_text("M { InitialStates { A } }", "first.sm")
        second = parse_text("M { InitialStates { B } }", "second.sm")

        errors, _ = lint_modules([first, second])

        assert errors == ["Machine 'M' is defined more than once (first in first.sm)"]

    def test_empty_project(self) -> None:
        errors, warnings = lint_modules([])

        assert errors == []
        assert warnings == ["No machines defined in project."]
