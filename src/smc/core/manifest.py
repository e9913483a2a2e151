"""
Project manifest models.

Parses `smc.toml` and provides typed configuration for source discovery and
package generation:

    [project]
    name = "turnstiles"

    [sources]
    paths = ["machines/"]

    [output]
    directory = "generated/"
    clean = true
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

import pydantic
from pydantic import BaseModel, Field

from .errors import SmcError

MANIFEST_NAME = "smc.toml"


class ProjectConfig(BaseModel):
    """Project metadata."""

    name: str = "unnamed"
    version: str = "0.0.0"


class SourcesConfig(BaseModel):
    """Where `.sm` files are searched for, relative to the project root."""

    paths: list[str] = Field(default_factory=lambda: ["machines/"])


class OutputConfig(BaseModel):
    """Output configuration."""

    directory: str = "generated/"
    clean: bool = True


class ProjectManifest(BaseModel):
    """
    Project manifest loaded from smc.toml.

    Attributes:
        root: Directory containing the manifest; relative paths resolve here
    """

    project: ProjectConfig = Field(default_factory=ProjectConfig)
    sources: SourcesConfig = Field(default_factory=SourcesConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    root: Path = Field(default_factory=Path.cwd)

    @property
    def name(self) -> str:
        return self.project.name

    @property
    def source_paths(self) -> list[Path]:
        """Absolute source directories."""
        return [self.resolve(p) for p in self.sources.paths]

    def get_output_path(self, override: Path | None = None) -> Path:
        """Get absolute output directory path."""
        return self.resolve(override if override is not None else self.output.directory)

    def resolve(self, path: str | Path) -> Path:
        path = Path(path)
        if path.is_absolute():
            return path
        return self.root / path


def load_manifest(path: Path) -> ProjectManifest:
    """
    Load the project manifest.

    Args:
        path: Path to smc.toml

    Returns:
        ProjectManifest with parsed values or defaults for missing sections

    Raises:
        SmcError: If the file cannot be read or holds invalid values
    """
    try:
        with open(path, "rb") as f:
            data: dict[str, Any] = tomllib.load(f)
    except OSError as e:
        raise SmcError(f"Cannot read manifest {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise SmcError(f"Invalid TOML in {path}: {e}") from e

    try:
        return ProjectManifest(
            project=ProjectConfig(**data.get("project", {})),
            sources=SourcesConfig(**data.get("sources", {})),
            output=OutputConfig(**data.get("output", {})),
            root=path.resolve().parent,
        )
    except pydantic.ValidationError as e:
        raise SmcError(f"Invalid manifest {path}: {e}") from e
    except TypeError as e:
        raise SmcError(f"Invalid manifest {path}: sections must be tables") from e
