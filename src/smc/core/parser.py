import logging
from pathlib import Path

from . import ir
from .dsl_parser_impl import parse_dsl
from .errors import SmcError

logger = logging.getLogger(__name__)


def parse_files(files: list[Path]) -> list[ir.MachineModule]:
    """
    Parse DSL files into MachineModule structures.

    Args:
        files: List of .sm file paths to parse

    Returns:
        List of MachineModule objects, one per file, in the given order

    Raises:
        ParseError: On the first malformed file
        SmcError: If a file cannot be read or is not valid UTF-8
    """
    modules: list[ir.MachineModule] = []

    for f in files:
        try:
            text = f.read_text(encoding="utf-8")
        except OSError as e:
            raise SmcError(f"Cannot read DSL file {f}: {e}") from e
        except UnicodeDecodeError as e:
            raise SmcError(f"Cannot decode DSL file {f} as UTF-8: {e}") from e

        machines = parse_dsl(text, f)
        logger.debug("Parsed %s: %s", f, ", ".join(m.name for m in machines) or "no machines")

        modules.append(ir.MachineModule(file=f, machines=machines))

    return modules


def parse_text(text: str, name: str = "<string>") -> ir.MachineModule:
    """
    Parse DSL text that does not come from a file.

    Args:
        text: DSL source text
        name: Pseudo file name used in error messages

    Returns:
        MachineModule holding the parsed machines
    """
    file = Path(name)
    return ir.MachineModule(file=file, machines=parse_dsl(text, file))
