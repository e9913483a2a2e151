"""
SMC code generation.

Turns parsed machines into Python:
- emitter: source text of one machine module
- package: writes a generated package to disk (`smc build`)
- loader: compiles machines into module objects in-process
"""

from .emitter import emit_machine, emit_package_init
from .generator import Generator, GeneratorResult
from .loader import load_machine, load_machines
from .package import PackageGenerator, generate_package

__all__ = [
    "emit_machine",
    "emit_package_init",
    "Generator",
    "GeneratorResult",
    "PackageGenerator",
    "generate_package",
    "load_machine",
    "load_machines",
]
