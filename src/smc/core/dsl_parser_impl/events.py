"""
Event parser mixin for the SMC DSL.

Parses event blocks, each holding one or more transition lines.

DSL Syntax:

    TurnKey {
        Locked => Unlocked
        Unlocked => Locked
    }

    Break { Locked, Unlocked => Broken }

Lines may be separated by whitespace, ',' or ';'.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import ir
from ..lexer import TokenType


class EventParserMixin:
    """Parser mixin for event blocks."""

    if TYPE_CHECKING:
        expect: Any
        advance: Any
        match: Any
        current_token: Any
        error: Any
        location: Any

    def parse_event_block(self) -> list[ir.TransitionDecl]:
        """
        Parse an event block.

        Grammar:
            IDENTIFIER '{' (IDENTIFIER,+ '=>' IDENTIFIER)+ '}'

        Returns:
            One TransitionDecl per `from` state, in declaration order
        """
        name_token = self.expect(TokenType.IDENTIFIER, "(event name)")
        event = ir.EventDecl(name=name_token.value, loc=self.location(name_token))
        self.expect(TokenType.LBRACE, f"to open event block '{event.name}'")

        transitions: list[ir.TransitionDecl] = []
        while not self.match(TokenType.RBRACE):
            transitions.extend(self._parse_transition_line(event))
            while self.match(TokenType.COMMA, TokenType.SEMICOLON):
                self.advance()

        if not transitions:
            raise self.error(
                f"Event block '{event.name}' needs at least one 'From => To' line",
                self.current_token(),
            )

        self.expect(TokenType.RBRACE, f"to close event block '{event.name}'")
        return transitions

    def _parse_transition_line(self, event: ir.EventDecl) -> list[ir.TransitionDecl]:
        """Parse `From1, From2 => To`."""
        sources = []
        while True:
            token = self.expect(TokenType.IDENTIFIER, f"(source state) in event block '{event.name}'")
            sources.append(token)
            if self.match(TokenType.COMMA):
                self.advance()
                continue
            if self.match(TokenType.FAT_ARROW):
                break
            raise self.error(
                f"Expected ',' or '=>' after state '{token.value}' in event block '{event.name}', "
                f"got '{self.current_token().value or 'end of input'}'"
            )

        arrow = self.expect(TokenType.FAT_ARROW)
        target_token = self.expect(TokenType.IDENTIFIER, f"(target state) after '=>' in '{event.name}'")
        target = ir.StateDecl(name=target_token.value, loc=self.location(target_token))

        return [
            ir.TransitionDecl(
                event=event,
                from_state=ir.StateDecl(name=source.value, loc=self.location(source)),
                to_state=target,
                loc=self.location(arrow),
            )
            for source in sources
        ]
