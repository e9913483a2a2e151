"""
Machine parser mixin for the SMC DSL.

DSL Syntax:

    Lock {
        GuardResources { ... }     # optional
        ActionResources { ... }    # optional
        InitialStates { ... }      # optional
        TurnKey { ... }            # event blocks
        Break { ... }
    }

The keyword blocks must appear in the order shown, each at most once, and
before the first event block.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import ir
from ..lexer import TokenType

# Position of each keyword block in the fixed block order
_BLOCK_ORDER = {
    TokenType.GUARD_RESOURCES: 1,
    TokenType.ACTION_RESOURCES: 2,
    TokenType.INITIAL_STATES: 3,
    TokenType.STATES: 3,
}
_EVENTS_STAGE = 4


class MachineParserMixin:
    """Parser mixin for machine blocks."""

    if TYPE_CHECKING:
        expect: Any
        advance: Any
        match: Any
        current_token: Any
        error: Any
        location: Any
        skip_separators: Any
        current_machine: str | None
        parse_resource_block: Any
        parse_initial_states_block: Any
        parse_event_block: Any

    def parse_machine(self) -> ir.MachineSpec:
        """
        Parse one machine block.

        Grammar:
            IDENTIFIER '{' GuardBlock? ActionBlock? InitialBlock? EventBlock* '}'

        Returns:
            MachineSpec for the block

        Raises:
            ParseError: On malformed input or a machine with no content
        """
        name_token = self.expect(TokenType.IDENTIFIER, "(machine name)")
        self.current_machine = name_token.value
        self.expect(TokenType.LBRACE, f"to open machine '{name_token.value}'")

        guard_resources: list[ir.ResourceParam] = []
        action_resources: list[ir.ResourceParam] = []
        initial_states: list[ir.InitialStateDecl] = []
        transitions: list[ir.TransitionDecl] = []
        stage = 0

        while not self.match(TokenType.RBRACE):
            self.skip_separators()
            if self.match(TokenType.RBRACE):
                break

            token = self.current_token()

            if token.type in _BLOCK_ORDER:
                block_stage = _BLOCK_ORDER[token.type]
                if stage >= block_stage:
                    raise self.error(
                        f"'{token.value}' block must come before "
                        f"{self._later_blocks(block_stage)} and may appear only once"
                    )
                stage = block_stage

                if token.type == TokenType.GUARD_RESOURCES:
                    guard_resources = self.parse_resource_block(TokenType.GUARD_RESOURCES)
                elif token.type == TokenType.ACTION_RESOURCES:
                    action_resources = self.parse_resource_block(TokenType.ACTION_RESOURCES)
                else:
                    initial_states = self.parse_initial_states_block()

            elif token.type == TokenType.IDENTIFIER:
                stage = _EVENTS_STAGE
                transitions.extend(self.parse_event_block())

            else:
                raise self.error(
                    "Expected event block, GuardResources, ActionResources or InitialStates "
                    f"in machine '{name_token.value}', got "
                    f"'{token.value or 'end of input'}'"
                )

        self.expect(TokenType.RBRACE, f"to close machine '{name_token.value}'")

        if not transitions and not initial_states:
            raise self.error(
                f"Machine '{name_token.value}' declares no transitions or initial states",
                name_token,
            )

        machine = ir.MachineSpec(
            name=name_token.value,
            transitions=transitions,
            initial_states=initial_states,
            guard_resources=guard_resources,
            action_resources=action_resources,
            loc=self.location(name_token),
        )
        self.current_machine = None
        return machine

    @staticmethod
    def _later_blocks(block_stage: int) -> str:
        names = ["ActionResources", "InitialStates", "event blocks"]
        return ", ".join(names[block_stage - 1 :])
