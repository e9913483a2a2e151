"""
Initial state parser mixin for the SMC DSL.

DSL Syntax:

    InitialStates { Locked, Unlocked }

`States { ... }` is accepted as an alias.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import ir
from ..lexer import TokenType


class InitialStatesParserMixin:
    """Parser mixin for the InitialStates block."""

    if TYPE_CHECKING:
        expect: Any
        advance: Any
        match: Any
        current_token: Any
        error: Any
        location: Any

    def parse_initial_states_block(self) -> list[ir.InitialStateDecl]:
        """
        Parse an initial states block.

        Grammar:
            ('InitialStates' | 'States') '{' IDENTIFIER,* '}'

        Returns:
            InitialStateDecls in declaration order
        """
        keyword = self.advance()
        self.expect(TokenType.LBRACE, f"to open the {keyword.value} block")

        states: list[ir.InitialStateDecl] = []
        while not self.match(TokenType.RBRACE):
            token = self.expect(TokenType.IDENTIFIER, f"(state name) in {keyword.value}")
            states.append(ir.InitialStateDecl(name=token.value, loc=self.location(token)))

            if self.match(TokenType.COMMA):
                self.advance()
            elif not self.match(TokenType.RBRACE):
                raise self.error(
                    f"Expected ',' or '}}' after state '{token.value}', "
                    f"got '{self.current_token().value}'"
                )

        self.expect(TokenType.RBRACE, f"to close the {keyword.value} block")
        return states
