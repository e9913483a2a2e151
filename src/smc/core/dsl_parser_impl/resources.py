"""
Resource parser mixin for the SMC DSL.

Parses the optional guard and action resource blocks.

DSL Syntax:

    GuardResources { coins: int, allowed: set[str] }
    ActionResources { log: list[str] }
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import ir
from ..lexer import Token, TokenType

# Tokens that may appear inside a type annotation
TYPE_TOKENS = (
    TokenType.IDENTIFIER,
    TokenType.NUMBER,
    TokenType.STRING,
    TokenType.LBRACKET,
    TokenType.RBRACKET,
    TokenType.LPAREN,
    TokenType.RPAREN,
    TokenType.COMMA,
    TokenType.DOT,
    TokenType.PIPE,
)

_OPENERS = {TokenType.LBRACKET: TokenType.RBRACKET, TokenType.LPAREN: TokenType.RPAREN}
_WORDS = (TokenType.IDENTIFIER, TokenType.NUMBER, TokenType.STRING)


def render_type(tokens: list[Token]) -> str:
    """
    Render annotation tokens back to Python annotation text.

    `dict [ str , int ]` becomes "dict[str, int]", `int|None` becomes "int | None".
    """
    parts: list[str] = []
    previous: Token | None = None
    for token in tokens:
        if token.type == TokenType.COMMA:
            parts.append(", ")
        elif token.type == TokenType.PIPE:
            parts.append(" | ")
        else:
            if previous is not None and previous.type in _WORDS and token.type in _WORDS:
                parts.append(" ")
            parts.append(token.value)
        previous = token
    return "".join(parts).strip()


class ResourceParserMixin:
    """Parser mixin for GuardResources / ActionResources blocks."""

    if TYPE_CHECKING:
        expect: Any
        advance: Any
        match: Any
        current_token: Any
        error: Any
        location: Any

    def parse_resource_block(self, keyword: TokenType) -> list[ir.ResourceParam]:
        """
        Parse a resource block.

        Grammar:
            (GuardResources | ActionResources) '{' (IDENTIFIER ':' TYPE),* '}'

        Returns:
            ResourceParams in declaration order
        """
        block_name = keyword.value
        self.expect(keyword)
        self.expect(TokenType.LBRACE, f"to open the {block_name} block")

        params: list[ir.ResourceParam] = []
        while not self.match(TokenType.RBRACE):
            name_token = self.expect(TokenType.IDENTIFIER, f"(resource name) in {block_name}")
            self.expect(TokenType.COLON, f"after resource name '{name_token.value}'")
            annotation = self.parse_type_annotation(name_token.value)
            params.append(
                ir.ResourceParam(
                    name=name_token.value,
                    type_annotation=annotation,
                    loc=self.location(name_token),
                )
            )

            if self.match(TokenType.COMMA):
                self.advance()
            elif not self.match(TokenType.RBRACE):
                raise self.error(
                    f"Expected ',' or '}}' after resource '{name_token.value}', "
                    f"got '{self.current_token().value}'"
                )

        self.expect(TokenType.RBRACE, f"to close the {block_name} block")
        return params

    def parse_type_annotation(self, resource_name: str) -> str:
        """
        Parse a type annotation up to the next top-level ',' or '}'.

        Brackets and parentheses must balance; commas inside them belong to
        the annotation.
        """
        start = self.current_token()
        tokens: list[Token] = []
        closers: list[TokenType] = []

        while True:
            token = self.current_token()
            if not closers and token.type in (TokenType.COMMA, TokenType.RBRACE):
                break
            if token.type not in TYPE_TOKENS:
                if token.type == TokenType.EOF:
                    raise self.error(f"Unterminated type annotation for resource '{resource_name}'")
                raise self.error(
                    f"Unexpected '{token.value}' in type annotation for resource '{resource_name}'"
                )
            if token.type in _OPENERS:
                closers.append(_OPENERS[token.type])
            elif token.type in (TokenType.RBRACKET, TokenType.RPAREN):
                if not closers or closers.pop() != token.type:
                    raise self.error(
                        f"Unbalanced '{token.value}' in type annotation for resource '{resource_name}'"
                    )
            tokens.append(self.advance())

        if not tokens:
            raise self.error(f"Expected type annotation for resource '{resource_name}'", start)

        return render_type(tokens)
