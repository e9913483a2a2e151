"""
SMC DSL Parser Package.

This package provides a modular parser for the SMC state machine DSL.
The parser is built using mixins to separate parsing logic by construct type.

The main exports are:
- Parser: The complete parser class
- parse_dsl: Convenience function to parse DSL text

Usage:
    from smc.core.dsl_parser_impl import parse_dsl

    machines = parse_dsl(text, file)
"""

import logging
from pathlib import Path

from .. import ir
from ..lexer import TokenType, tokenize
from .base import BaseParser
from .events import EventParserMixin
from .machine import MachineParserMixin
from .resources import ResourceParserMixin
from .states import InitialStatesParserMixin

logger = logging.getLogger(__name__)


class Parser(
    BaseParser,
    ResourceParserMixin,
    InitialStatesParserMixin,
    EventParserMixin,
    MachineParserMixin,
):
    """
    Complete SMC DSL Parser.

    This class composes all parser mixins:

    - ResourceParserMixin: GuardResources / ActionResources blocks
    - InitialStatesParserMixin: InitialStates (or States) block
    - EventParserMixin: Event blocks and their transition lines
    - MachineParserMixin: Machine blocks tying the above together
    """

    def parse(self) -> list[ir.MachineSpec]:
        """
        Parse every machine block in the token stream.

        Returns:
            MachineSpecs in source order. Blocks do not share namespaces.
        """
        machines: list[ir.MachineSpec] = []

        self.skip_separators()
        while not self.match(TokenType.EOF):
            machine = self.parse_machine()
            logger.debug(
                "Parsed machine %s: %d transitions, %d initial states",
                machine.name,
                len(machine.transitions),
                len(machine.initial_states),
            )
            machines.append(machine)
            self.skip_separators()

        return machines


def parse_dsl(text: str, file: Path) -> list[ir.MachineSpec]:
    """
    Parse DSL text into machine specifications.

    Args:
        text: DSL source text
        file: Source file path (for error reporting)

    Returns:
        List of MachineSpec, one per machine block

    Raises:
        ParseError: If the text is malformed; no partial result is returned
    """
    tokens = tokenize(text, file)
    parser = Parser(tokens, file, text)
    return parser.parse()


__all__ = [
    "Parser",
    "parse_dsl",
]
