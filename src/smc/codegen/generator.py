"""
Base generator classes for machine code generation.

Generators are responsible for creating specific artifacts from parsed
machine modules:
- PackageGenerator writes one Python module per machine plus `__init__.py`

Each generator focuses on one aspect, making them easier to:
- Understand
- Test
- Modify
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from smc.core import ir


@dataclass
class GeneratorResult:
    """
    Result from a generator execution.

    Attributes:
        files_created: List of file paths that were created/modified
        artifacts: Data to share with other generators or callers
        warnings: Any warnings to display to user
    """

    files_created: list[Path] = field(default_factory=list)
    artifacts: dict[str, Any] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)

    def add_file(self, path: Path, content: str | None = None) -> None:
        """
        Record a file that was created.

        If content is provided, the file is also written to disk.
        """
        if content is not None:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        self.files_created.append(path)

    def add_artifact(self, key: str, value: Any) -> None:
        self.artifacts[key] = value

    def add_warning(self, warning: str) -> None:
        self.warnings.append(warning)


class Generator(ABC):
    """
    Base class for all generators.

    A generator creates specific artifacts from parsed machine modules.

    Example:
        class SummaryGenerator(Generator):
            def generate(self) -> GeneratorResult:
                result = GeneratorResult()
                names = [m.name for m in self.machines]
                result.add_file(self.output_dir / "SUMMARY.txt", "\\n".join(names))
                result.add_artifact("machine_names", names)
                return result
    """

    def __init__(self, modules: list[ir.MachineModule], output_dir: Path):
        """
        Initialize generator.

        Args:
            modules: Parsed DSL files
            output_dir: Directory the generated package is written to
        """
        self.modules = modules
        self.output_dir = output_dir

    @property
    def machines(self) -> list[ir.MachineSpec]:
        """Every machine across all modules, in file order."""
        return [machine for module in self.modules for machine in module.machines]

    @abstractmethod
    def generate(self) -> GeneratorResult:
        """
        Generate artifacts.

        Returns:
            GeneratorResult with files created and artifacts
        """
        pass

    def _ensure_dir(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)
