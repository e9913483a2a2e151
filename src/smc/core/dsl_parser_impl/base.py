"""
Base parser class for the SMC DSL.

Provides common token manipulation and utility methods used by all parser mixins.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from ..errors import ParseError, extract_snippet, make_parse_error
from ..lexer import Token, TokenType

if TYPE_CHECKING:
    from .. import ir


# Human-readable names used in "Expected ..." messages
TOKEN_DESCRIPTIONS = {
    TokenType.IDENTIFIER: "identifier",
    TokenType.NUMBER: "number",
    TokenType.STRING: "string",
    TokenType.LBRACE: "'{'",
    TokenType.RBRACE: "'}'",
    TokenType.LBRACKET: "'['",
    TokenType.RBRACKET: "']'",
    TokenType.LPAREN: "'('",
    TokenType.RPAREN: "')'",
    TokenType.FAT_ARROW: "'=>'",
    TokenType.COLON: "':'",
    TokenType.COMMA: "','",
    TokenType.SEMICOLON: "';'",
    TokenType.DOT: "'.'",
    TokenType.PIPE: "'|'",
    TokenType.EOF: "end of input",
}


def describe_token_type(token_type: TokenType) -> str:
    """Describe a token type for error messages."""
    return TOKEN_DESCRIPTIONS.get(token_type, f"'{token_type.value}'")


def describe_token(token: Token) -> str:
    """Describe a concrete token for error messages."""
    if token.type == TokenType.EOF:
        return "end of input"
    if token.type == TokenType.IDENTIFIER:
        return f"identifier '{token.value}'"
    return f"'{token.value}'"


@runtime_checkable
class ParserProtocol(Protocol):
    """
    Protocol defining the interface available to parser mixins.

    This allows mypy to understand that mixins will have access to
    BaseParser methods when combined in the final Parser class.
    """

    tokens: list[Token]
    file: Path
    pos: int

    def current_token(self) -> Token: ...
    def advance(self) -> Token: ...
    def expect(self, token_type: TokenType, construct: str | None = None) -> Token: ...
    def match(self, *token_types: TokenType) -> bool: ...
    def error(self, message: str, token: Token | None = None) -> ParseError: ...
    def location(self, token: Token) -> "ir.SourceLocation": ...

    # Methods from other mixins that may be called cross-mixin
    def parse_resource_block(self, keyword: TokenType) -> list["ir.ResourceParam"]: ...
    def parse_initial_states_block(self) -> list["ir.InitialStateDecl"]: ...
    def parse_event_block(self) -> list["ir.TransitionDecl"]: ...


class BaseParser:
    """
    Base parser class with token manipulation utilities.

    This class provides the foundation for recursive descent parsing,
    including token navigation, matching, and error generation.
    """

    def __init__(self, tokens: list[Token], file: Path, text: str | None = None):
        """
        Initialize parser.

        Args:
            tokens: List of tokens from lexer
            file: Source file path (for error reporting)
            text: Optional source text, used to attach snippets to errors
        """
        self.tokens = tokens
        self.file = file
        self.text = text
        self.pos = 0
        self.current_machine: str | None = None

    def current_token(self) -> Token:
        """Get current token."""
        if self.pos >= len(self.tokens):
            return self.tokens[-1]  # Return EOF
        return self.tokens[self.pos]

    def advance(self) -> Token:
        """Consume and return current token."""
        token = self.current_token()
        if token.type != TokenType.EOF:
            self.pos += 1
        return token

    def error(self, message: str, token: Token | None = None) -> ParseError:
        """Build a ParseError located at `token` (default: current token)."""
        token = token or self.current_token()
        snippet = extract_snippet(self.text, token.line) if self.text else None
        return make_parse_error(
            message,
            self.file,
            token.line,
            token.column,
            snippet=snippet,
            machine=self.current_machine,
        )

    def expect(self, token_type: TokenType, construct: str | None = None) -> Token:
        """
        Expect a specific token type and consume it.

        Args:
            token_type: Required token type
            construct: What the token is for, e.g. "to open the machine body"

        Raises:
            ParseError: If token doesn't match
        """
        token = self.current_token()
        if token.type != token_type:
            expected = describe_token_type(token_type)
            if construct:
                expected = f"{expected} {construct}"
            raise self.error(f"Expected {expected}, got {describe_token(token)}", token)
        return self.advance()

    def match(self, *token_types: TokenType) -> bool:
        """Check if current token matches any of the given types."""
        return self.current_token().type in token_types

    def skip_separators(self) -> None:
        """Skip optional `;` separators."""
        while self.match(TokenType.SEMICOLON):
            self.advance()

    def location(self, token: Token) -> "ir.SourceLocation":
        """Source location of a token."""
        from .. import ir

        return ir.SourceLocation(file=str(self.file), line=token.line, column=token.column)
