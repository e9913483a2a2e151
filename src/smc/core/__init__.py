"""Core SMC functionality: IR, lexer, parser, analyzer, dispatch, validation, project config."""

from . import analyzer, dispatch, ir
from .errors import (
    ErrorContext,
    GenerationError,
    ParseError,
    SmcError,
    ValidationError,
)
from .lint import lint_machine, lint_modules
from .manifest import ProjectManifest, load_manifest
from .parser import parse_files, parse_text
from .validator import validate_machine

__all__ = [
    "ir",
    "analyzer",
    "dispatch",
    "SmcError",
    "ParseError",
    "ValidationError",
    "GenerationError",
    "ErrorContext",
    "lint_machine",
    "lint_modules",
    "ProjectManifest",
    "load_manifest",
    "parse_files",
    "parse_text",
    "validate_machine",
]
