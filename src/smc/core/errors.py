"""
Error types for SMC DSL parsing, validation, and code generation.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class SmcError(Exception):
    """Base exception for all SMC errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class ParseError(SmcError):
    """
    Raised when DSL syntax cannot be parsed.

    Examples:
    - Missing braces or `=>`
    - Unexpected tokens
    - Keyword blocks out of order
    - Machine blocks with nothing in them
    """

    pass


class ValidationError(SmcError):
    """
    Raised when a parsed machine cannot be turned into valid Python.

    Examples:
    - A name used both as a state and an event
    - A state or event named after a Python keyword
    - A resource parameter declared twice
    """

    pass


class GenerationError(SmcError):
    """
    Raised when generated output cannot be written or loaded.

    Examples:
    - Output directory issues
    - Generated source failing to compile
    """

    pass


@dataclass
class ErrorContext:
    """
    Context information for an error, including source location.

    Attributes:
        file: Path to the source file where error occurred
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional source snippet around the error location
        machine: Optional machine name where error occurred
    """

    file: Path
    line: int
    column: int
    snippet: str | None = None
    machine: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "lock.sm:10:5 in machine Lock"
        """
        location = f"{self.file}:{self.line}:{self.column}"
        if self.machine:
            location += f" in machine {self.machine}"

        if self.snippet:
            return f"{location}\n{self._format_snippet()}"
        return location

    def _format_snippet(self) -> str:
        """Format code snippet with line numbers and error marker."""
        if not self.snippet:
            return ""

        lines = self.snippet.split("\n")
        formatted = []

        # Snippet starts up to 2 lines before the error line
        start_line = max(1, self.line - 2)

        for i, line in enumerate(lines):
            line_num = start_line + i
            prefix = f"{line_num:4d} | "
            formatted.append(prefix + line)

            if line_num == self.line:
                marker_pos = len(prefix) + self.column - 1
                formatted.append(" " * marker_pos + "^^^")

        return "\n".join(formatted)


def extract_snippet(text: str, line: int, context_lines: int = 2) -> str:
    """
    Cut the lines around `line` out of a source text.

    Args:
        text: Full source text
        line: Line number (1-indexed) of the error
        context_lines: Lines to keep before and after

    Returns:
        The selected lines joined by newlines
    """
    lines = text.split("\n")
    start = max(0, line - 1 - context_lines)
    end = min(len(lines), line + context_lines)
    return "\n".join(lines[start:end])


def make_parse_error(
    message: str,
    file: Path,
    line: int,
    column: int,
    snippet: str | None = None,
    machine: str | None = None,
) -> ParseError:
    """
    Helper to create a ParseError with context.

    Args:
        message: Error description
        file: Source file path
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional code snippet
        machine: Optional machine name

    Returns:
        ParseError with context attached
    """
    context = ErrorContext(file=file, line=line, column=column, snippet=snippet, machine=machine)
    return ParseError(message, context)


def make_validation_error(
    message: str,
    file: Path | None = None,
    line: int | None = None,
    column: int | None = None,
    machine: str | None = None,
) -> ValidationError:
    """
    Helper to create a ValidationError with optional context.

    Args:
        message: Error description
        file: Optional source file path
        line: Optional line number
        column: Optional column number
        machine: Optional machine name

    Returns:
        ValidationError with context if location provided
    """
    if file and line and column:
        context = ErrorContext(
            file=file,
            line=line,
            column=column,
            machine=machine,
        )
        return ValidationError(message, context)
    return ValidationError(message)
