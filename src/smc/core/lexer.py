"""
Lexer/Tokenizer for the SMC state machine DSL.

Converts raw DSL text into a stream of tokens with source location tracking.
Blocks are brace-delimited, so whitespace and newlines carry no meaning.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .errors import extract_snippet, make_parse_error


class TokenType(Enum):
    """Token types in the SMC DSL."""

    # Literals
    IDENTIFIER = "IDENTIFIER"
    NUMBER = "NUMBER"
    STRING = "STRING"

    # Keywords
    GUARD_RESOURCES = "GuardResources"
    ACTION_RESOURCES = "ActionResources"
    INITIAL_STATES = "InitialStates"
    STATES = "States"  # alias of InitialStates

    # Delimiters
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"
    LPAREN = "("
    RPAREN = ")"

    # Operators
    FAT_ARROW = "=>"
    COLON = ":"
    COMMA = ","
    SEMICOLON = ";"
    DOT = "."
    PIPE = "|"

    EOF = "EOF"


KEYWORDS = {
    "GuardResources",
    "ActionResources",
    "InitialStates",
    "States",
}

SINGLE_CHAR_TOKENS = {
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    ":": TokenType.COLON,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    ".": TokenType.DOT,
    "|": TokenType.PIPE,
}


@dataclass
class Token:
    """
    A single token in the DSL.

    Attributes:
        type: Type of token
        value: String value of the token
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    type: TokenType
    value: str
    line: int
    column: int

    def __repr__(self) -> str:
        return f"Token({self.type.value}, {self.value!r}, {self.line}:{self.column})"


class Lexer:
    """
    Lexer for the SMC DSL.

    Converts source text into a flat stream of tokens.
    """

    def __init__(self, text: str, file: Path):
        """
        Initialize lexer.

        Args:
            text: Source text to tokenize
            file: Source file path (for error reporting)
        """
        self.text = text
        self.file = file
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: list[Token] = []

    def current_char(self) -> str | None:
        """Get current character or None if at end."""
        if self.pos >= len(self.text):
            return None
        return self.text[self.pos]

    def peek_char(self, offset: int = 1) -> str | None:
        """Peek ahead at character."""
        pos = self.pos + offset
        if pos >= len(self.text):
            return None
        return self.text[pos]

    def advance(self) -> None:
        """Move to next character, updating line/column."""
        if self.pos < len(self.text):
            if self.text[self.pos] == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def skip_whitespace(self) -> None:
        """Skip whitespace characters, newlines included."""
        while self.current_char() in (" ", "\t", "\r", "\n"):
            self.advance()

    def skip_comment(self) -> None:
        """Skip comment (`#` or `//` to end of line)."""
        while self.current_char() and self.current_char() != "\n":
            self.advance()

    def at_comment(self) -> bool:
        """Check whether a comment starts at the current position."""
        ch = self.current_char()
        return ch == "#" or (ch == "/" and self.peek_char() == "/")

    def read_string(self) -> str:
        """Read a quoted string, keeping its quotes for use in annotations."""
        start_line = self.line
        start_col = self.column
        quote = self.current_char()
        self.advance()

        chars = [quote or ""]
        while True:
            current = self.current_char()
            if not current or current == quote or current == "\n":
                break
            if current == "\\":
                chars.append(current)
                self.advance()
                escaped = self.current_char()
                if escaped:
                    chars.append(escaped)
                    self.advance()
                continue
            chars.append(current)
            self.advance()

        if self.current_char() != quote:
            raise make_parse_error(
                "Unterminated string literal",
                self.file,
                start_line,
                start_col,
                snippet=extract_snippet(self.text, start_line),
            )

        self.advance()
        chars.append(quote or "")
        return "".join(chars)

    def read_number(self) -> str:
        """Read an integer or decimal number."""
        chars = []
        current = self.current_char()
        while current and (current.isdigit() or current == "."):
            chars.append(current)
            self.advance()
            current = self.current_char()
        return "".join(chars)

    def read_identifier(self) -> str:
        """Read an identifier or keyword."""
        chars = []
        current = self.current_char()
        while current and (current.isalnum() or current == "_"):
            chars.append(current)
            self.advance()
            current = self.current_char()
        return "".join(chars)

    def tokenize(self) -> list[Token]:
        """
        Tokenize the entire source text.

        Returns:
            List of tokens ending with EOF

        Raises:
            ParseError: If an unexpected character is encountered
        """
        while self.pos < len(self.text):
            self.skip_whitespace()

            if self.at_comment():
                self.skip_comment()
                continue

            ch = self.current_char()
            if ch is None:
                break

            token_line = self.line
            token_col = self.column

            if ch.isalpha() or ch == "_":
                value = self.read_identifier()
                if value in KEYWORDS:
                    token_type = TokenType(value)
                else:
                    token_type = TokenType.IDENTIFIER
                self.tokens.append(Token(token_type, value, token_line, token_col))

            elif ch.isdigit():
                value = self.read_number()
                self.tokens.append(Token(TokenType.NUMBER, value, token_line, token_col))

            elif ch in ('"', "'"):
                value = self.read_string()
                self.tokens.append(Token(TokenType.STRING, value, token_line, token_col))

            elif ch == "=" and self.peek_char() == ">":
                self.advance()
                self.advance()
                self.tokens.append(Token(TokenType.FAT_ARROW, "=>", token_line, token_col))

            elif ch in SINGLE_CHAR_TOKENS:
                self.advance()
                self.tokens.append(Token(SINGLE_CHAR_TOKENS[ch], ch, token_line, token_col))

            else:
                raise make_parse_error(
                    f"Unexpected character: {ch!r}",
                    self.file,
                    token_line,
                    token_col,
                    snippet=extract_snippet(self.text, token_line),
                )

        self.tokens.append(Token(TokenType.EOF, "", self.line, self.column))

        return self.tokens


def tokenize(text: str, file: Path) -> list[Token]:
    """
    Convenience function to tokenize DSL text.

    Args:
        text: Source text
        file: Source file path

    Returns:
        List of tokens
    """
    lexer = Lexer(text, file)
    return lexer.tokenize()
