"""
Package generator.

Writes one Python module per machine into the output directory, plus an
`__init__.py` importing all of them:

    generated/
        __init__.py
        lock.py
        turn_stile.py
"""

from __future__ import annotations

import logging
from pathlib import Path

from smc.core import analyzer, dispatch, ir
from smc.core.errors import GenerationError
from smc.core.validator import validate_machine

from .emitter import emit_machine, emit_package_init
from .generator import Generator, GeneratorResult
from .utils import GENERATED_HEADER, module_name_for

logger = logging.getLogger(__name__)

INIT_FILE = "__init__.py"


class PackageGenerator(Generator):
    """
    Generate an importable package of machine modules.

    Every machine is validated before anything is written. With `clean`,
    previously generated modules that no machine produces any more are
    removed; hand-written files (without the generated header) are kept.
    """

    def __init__(self, modules: list[ir.MachineModule], output_dir: Path, clean: bool = True):
        super().__init__(modules, output_dir)
        self.clean = clean

    def render(self) -> dict[str, str]:
        """
        Render every file of the package without writing it.

        Returns:
            File name -> source text, in machine order with `__init__.py` last

        Raises:
            ValidationError: If a machine would generate invalid Python
            GenerationError: If two machines map to the same module name
        """
        files: dict[str, str] = {}
        owners: dict[str, str] = {}

        for module in self.modules:
            for machine in module.machines:
                validate_machine(machine)

                module_name = module_name_for(machine)
                if module_name in owners:
                    raise GenerationError(
                        f"Machines '{owners[module_name]}' and '{machine.name}' "
                        f"both generate module '{module_name}'"
                    )
                owners[module_name] = machine.name

                derived = analyzer.analyze(machine)
                arms = dispatch.synthesize(machine, derived)
                files[f"{module_name}.py"] = emit_machine(
                    machine, derived, arms, source=module.file.name
                )

        files[INIT_FILE] = emit_package_init(list(owners))
        return files

    def generate(self) -> GeneratorResult:
        result = GeneratorResult()
        files = self.render()

        try:
            self._ensure_dir(self.output_dir)
            if self.clean:
                for stale in self._stale_files(files):
                    logger.info("Removing stale generated module %s", stale)
                    stale.unlink()
                    result.add_warning(f"Removed stale module {stale.name}")

            for name, content in files.items():
                path = self.output_dir / name
                result.add_file(path, content)
                logger.info("Wrote %s", path)
        except OSError as e:
            raise GenerationError(f"Cannot write to {self.output_dir}: {e}") from e

        result.add_artifact("machine_names", [m.name for m in self.machines])
        result.add_artifact("module_names", [n.removesuffix(".py") for n in files if n != INIT_FILE])
        return result

    def _stale_files(self, files: dict[str, str]) -> list[Path]:
        stale = []
        for path in sorted(self.output_dir.glob("*.py")):
            if path.name in files:
                continue
            if _is_generated(path):
                stale.append(path)
        return stale


def _is_generated(path: Path) -> bool:
    try:
        head = path.read_text(encoding="utf-8")[:500]
    except (OSError, UnicodeDecodeError):
        return False
    return GENERATED_HEADER in head


def generate_package(
    modules: list[ir.MachineModule], output_dir: Path, clean: bool = True
) -> GeneratorResult:
    """Write the generated package for `modules` into `output_dir`."""
    return PackageGenerator(modules, output_dir, clean=clean).generate()
