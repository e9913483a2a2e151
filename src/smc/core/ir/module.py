"""
Module-level IR types for SMC.

A MachineModule is the parser output for a single DSL file.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from .machine import MachineSpec


class MachineModule(BaseModel):
    """
    Machines parsed from one DSL file.

    Attributes:
        file: Source file path
        machines: Machine definitions in file order
    """

    file: Path
    machines: list[MachineSpec] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def machine_names(self) -> list[str]:
        return [m.name for m in self.machines]

    def get_machine(self, name: str) -> MachineSpec | None:
        """Look up a machine by name."""
        for machine in self.machines:
            if machine.name == name:
                return machine
        return None
