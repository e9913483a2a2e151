"""Tests for SMC DSL parsing."""

from pathlib import Path

import pytest

from smc.core.dsl_parser_impl import parse_dsl
from smc.core.errors import ParseError, SmcError
from smc.core.parser import parse_files, parse_text


def parse(text: str):
    return parse_dsl(text, Path("test.sm"))


class TestMachineParsing:
    """Tests for complete machine blocks."""

    def test_lock_machine(self, lock_dsl: str) -> None:
        machines = parse(lock_dsl)

        assert len(machines) == 1
        lock = machines[0]
        assert lock.name == "Lock"
        assert lock.initial_state_names == ["Locked", "Unlocked", "Broken"]
        assert [str(t) for t in lock.transitions] == [
            "TurnKey: Locked => Unlocked",
            "TurnKey: Unlocked => Locked",
            "Break: Locked => Broken",
            "Break: Unlocked => Broken",
        ]
        assert lock.guard_resources == []
        assert lock.action_resources == []

    def test_multi_source_line_shares_event_and_target(self) -> None:
        machine = parse("M { InitialStates { A } Go { A, B, C => D } }")[0]

        assert [t.from_state.name for t in machine.transitions] == ["A", "B", "C"]
        assert {t.to_state.name for t in machine.transitions} == {"D"}
        assert {t.event.name for t in machine.transitions} == {"Go"}

    def test_resources(self) -> None:
        machine = parse(
            """
            M {
                GuardResources { coins: int, table: dict[str, list[int]], maybe: int | None, }
                ActionResources { log: list[str] }
                Go { A => B }
            }
            """
        )[0]

        assert machine.guard_names == ["coins", "table", "maybe"]
        assert [r.type_annotation for r in machine.guard_resources] == [
            "int",
            "dict[str, list[int]]",
            "int | None",
        ]
        assert machine.action_names == ["log"]
        assert machine.action_resources[0].type_annotation == "list[str]"

    def test_dotted_and_literal_annotations(self) -> None:
        machine = parse(
            "M { GuardResources { at: datetime.datetime, mode: Literal['a', 'b'] } Go { A => B } }"
        )[0]

        assert machine.guard_resources[0].type_annotation == "datetime.datetime"
        assert machine.guard_resources[1].type_annotation == "Literal['a', 'b']"

    def test_states_alias(self) -> None:
        aliased = parse("M { States { A } Go { A => B } }")[0]
        canonical = parse("M { InitialStates { A } Go { A => B } }")[0]

        assert aliased.initial_state_names == canonical.initial_state_names == ["A"]

    def test_initial_states_only(self) -> None:
        machine = parse("Idle { InitialStates { Waiting } }")[0]

        assert machine.transitions == []
        assert machine.initial_state_names == ["Waiting"]

    def test_transitions_only(self) -> None:
        machine = parse("M { Go { A => B } }")[0]

        assert machine.initial_states == []
        assert len(machine.transitions) == 1

    def test_line_separators(self) -> None:
        newline = parse("M { Go {\n A => B\n B => C\n} }")[0]
        comma = parse("M { Go { A => B, B => C } }")[0]
        semicolon = parse("M { Go { A => B; B => C; } }")[0]

        expected = ["Go: A => B", "Go: B => C"]
        for machine in (newline, comma, semicolon):
            assert [str(t) for t in machine.transitions] == expected

    def test_repeated_event_blocks(self) -> None:
        machine = parse("M { Go { A => B } Stop { B => A } Go { B => C } }")[0]

        assert [str(t) for t in machine.transitions] == [
            "Go: A => B",
            "Stop: B => A",
            "Go: B => C",
        ]

    def test_multiple_machines_are_independent(self) -> None:
        machines = parse(
            """
            First { InitialStates { A } Go { A => B } };
            Second { InitialStates { A } Go { A => C } }
            """
        )

        assert [m.name for m in machines] == ["First", "Second"]
        assert machines[0].transitions[0].to_state.name == "B"
        assert machines[1].transitions[0].to_state.name == "C"

    def test_locations(self) -> None:
        machine = parse("M {\n  Go {\n    A => B\n  }\n}")[0]

        assert machine.loc is not None
        assert (machine.loc.line, machine.loc.column) == (1, 1)
        transition = machine.transitions[0]
        assert transition.loc is not None
        assert (transition.loc.line, transition.loc.column) == (3, 7)
        assert str(transition.loc) == "test.sm:3:7"

    def test_empty_input(self) -> None:
        assert parse("") == []
        assert parse("# nothing here\n") == []


class TestParseErrors:
    """Malformed input is rejected with a located ParseError."""

    def test_missing_arrow(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse("M { Go { A B } }")

        error = exc_info.value
        assert "Expected ',' or '=>' after state 'A'" in error.message
        assert error.context is not None
        assert (error.context.line, error.context.column) == (1, 12)
        assert error.context.machine == "M"

    def test_missing_target(self) -> None:
        with pytest.raises(ParseError, match="target state"):
            parse("M { Go { A => } }")

    def test_missing_closing_brace(self) -> None:
        with pytest.raises(ParseError, match="end of input"):
            parse("M { Go { A => B }")

    def test_empty_event_block(self) -> None:
        with pytest.raises(ParseError, match="Event block 'Go' needs at least one"):
            parse("M { InitialStates { A } Go { } }")

    def test_empty_machine_reported_at_name(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse("\n  Empty { }")

        error = exc_info.value
        assert "Machine 'Empty' declares no transitions or initial states" in error.message
        assert error.context is not None
        assert (error.context.line, error.context.column) == (2, 3)

    def test_empty_initial_states_and_no_transitions(self) -> None:
        with pytest.raises(ParseError, match="declares no transitions"):
            parse("M { InitialStates { } }")

    def test_keyword_blocks_out_of_order(self) -> None:
        with pytest.raises(ParseError, match="'GuardResources' block must come before"):
            parse("M { InitialStates { A } GuardResources { a: bool } Go { A => B } }")

    def test_keyword_block_after_events(self) -> None:
        with pytest.raises(ParseError, match="'InitialStates' block must come before event blocks"):
            parse("M { Go { A => B } InitialStates { A } }")

    def test_duplicate_keyword_block(self) -> None:
        with pytest.raises(ParseError, match="may appear only once"):
            parse("M { ActionResources { a: int } ActionResources { b: int } Go { A => B } }")

    def test_resource_without_type(self) -> None:
        with pytest.raises(ParseError, match="Expected type annotation for resource 'a'"):
            parse("M { GuardResources { a: } Go { A => B } }")

    def test_resource_without_colon(self) -> None:
        with pytest.raises(ParseError, match="after resource name 'a'"):
            parse("M { GuardResources { a int } Go { A => B } }")

    def test_unbalanced_annotation(self) -> None:
        with pytest.raises(ParseError, match="Unbalanced"):
            parse("M { GuardResources { a: list[int) } Go { A => B } }")

    def test_unclosed_annotation_bracket(self) -> None:
        with pytest.raises(ParseError, match="type annotation for resource 'a'"):
            parse("M { GuardResources { a: list[int } Go { A => B } }")

    def test_error_includes_snippet(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse("M {\n  Go { A B }\n}")

        message = str(exc_info.value)
        assert "test.sm:2:10 in machine M" in message
        assert "   2 |   Go { A B }" in message
        assert "^^^" in message


class TestParseFiles:
    def test_parse_fixture_files(self, dsl_fixtures_dir: Path) -> None:
        modules = parse_files([dsl_fixtures_dir / "lock.sm", dsl_fixtures_dir / "turnstile.sm"])

        assert [m.machine_names for m in modules] == [["Lock"], ["TurnStile"]]
        assert modules[0].file == dsl_fixtures_dir / "lock.sm"
        turnstile = modules[1].get_machine("TurnStile")
        assert turnstile is not None
        assert turnstile.guard_names == ["coins", "pushed"]
        assert modules[1].get_machine("Missing") is None

    def test_parse_error_names_file(self, dsl_fixtures_dir: Path) -> None:
        path = dsl_fixtures_dir / "invalid_syntax.sm"
        with pytest.raises(ParseError) as exc_info:
            parse_files([path])

        assert exc_info.value.context is not None
        assert exc_info.value.context.file == path
        assert exc_info.value.context.line == 3

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(SmcError, match="Cannot read DSL file"):
            parse_files([tmp_path / "missing.sm"])

    def test_undecodable_file(self, tmp_path: Path) -> None:
        path = tmp_path / "latin.sm"
        path.write_bytes(b"M { InitialStates { A\xff } }")

        with pytest.raises(SmcError, match="Cannot decode DSL file"):
            parse_files([path])

    def test_parse_text(self) -> None:
        module = parse_text("M { Go { A => B } }", name="inline.sm")

        assert module.file == Path("inline.sm")
        assert module.machine_names == ["M"]
