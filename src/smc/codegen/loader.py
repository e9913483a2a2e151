"""
In-process machine loading.

Compiles DSL text straight into module objects, without writing the
generated package to disk:

    machines = load_machines(LOCK_DSL)
    lock = machines["Lock"]
    m = lock.Machine.new(lock.Locked)

Modules are not registered in `sys.modules`; each call builds fresh event
classes, so guards registered on one load do not leak into another.
"""

from __future__ import annotations

import importlib.abc
import importlib.util
import logging
import types

from smc.core import ir
from smc.core.errors import GenerationError
from smc.core.parser import parse_text
from smc.core.validator import validate_machine

from .emitter import emit_machine
from .utils import module_name_for

logger = logging.getLogger(__name__)


class _MachineLoader(importlib.abc.InspectLoader):
    """Serves one emitted machine module from memory."""

    def __init__(self, source: str, filename: str):
        self.source = source
        self.filename = filename

    def get_source(self, fullname: str) -> str:
        return self.source

    def get_code(self, fullname: str) -> types.CodeType:
        return compile(self.source, self.filename, "exec")

    def is_package(self, fullname: str) -> bool:
        return False


def load_machine(spec: ir.MachineSpec, source: str | None = None) -> types.ModuleType:
    """
    Compile one machine into a module object.

    Raises:
        ValidationError: If the machine would generate invalid Python
        GenerationError: If the emitted source fails to compile or execute
    """
    validate_machine(spec)

    module_name = module_name_for(spec)
    code = emit_machine(spec, source=source)
    filename = f"<smc:{spec.name}>"

    loader = _MachineLoader(code, filename)
    module_spec = importlib.util.spec_from_loader(module_name, loader, origin=filename)
    if module_spec is None:
        raise GenerationError(f"Cannot create a module spec for {spec.name}")
    module = importlib.util.module_from_spec(module_spec)
    try:
        loader.exec_module(module)
    except SyntaxError as e:
        raise GenerationError(f"Generated code for {spec.name} does not compile: {e}") from e
    except Exception as e:
        raise GenerationError(f"Generated code for {spec.name} failed to load: {e}") from e

    logger.debug("Loaded machine %s as module %s", spec.name, module_name)
    return module


def load_machines(text: str, name: str = "<string>") -> dict[str, types.ModuleType]:
    """
    Parse DSL text and compile every machine it declares.

    Args:
        text: DSL source text
        name: Pseudo file name used in error messages

    Returns:
        Machine name -> generated module, in declaration order
    """
    parsed = parse_text(text, name)
    return {machine.name: load_machine(machine, source=name) for machine in parsed.machines}
