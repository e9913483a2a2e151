"""Shared pytest fixtures for SMC tests."""

from pathlib import Path

import pytest

from smc.core import ir
from smc.core.parser import parse_files, parse_text

LOCK_DSL = """
Lock {
    States { Locked, Unlocked, Broken };
    TurnKey { Locked => Unlocked, Unlocked => Locked }
    Break { Locked, Unlocked => Broken }
}
"""

COIN_DSL = """
Slot {
    GuardResources { a: bool }
    ActionResources { log: list[str] }
    InitialStates { Waiting }
    Coin { Waiting => Paid }
}
"""


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def dsl_fixtures_dir(fixtures_dir: Path) -> Path:
    """Return path to DSL fixtures directory."""
    return fixtures_dir / "dsl"


@pytest.fixture
def lock_dsl() -> str:
    return LOCK_DSL


@pytest.fixture
def coin_dsl() -> str:
    return COIN_DSL


@pytest.fixture
def lock_spec() -> ir.MachineSpec:
    """Return the parsed Lock machine."""
    return parse_text(LOCK_DSL).machines[0]


@pytest.fixture
def coin_spec() -> ir.MachineSpec:
    """Return a one-event machine guarded by a single bool resource."""
    return parse_text(COIN_DSL).machines[0]


@pytest.fixture
def turnstile_module(dsl_fixtures_dir: Path) -> ir.MachineModule:
    """Return the parsed turnstile.sm fixture."""
    return parse_files([dsl_fixtures_dir / "turnstile.sm"])[0]


@pytest.fixture
def project_dir(tmp_path: Path, dsl_fixtures_dir: Path) -> Path:
    """Create an smc project holding the lock and turnstile fixtures."""
    machines = tmp_path / "machines"
    machines.mkdir()
    for name in ("lock.sm", "turnstile.sm"):
        (machines / name).write_text((dsl_fixtures_dir / name).read_text())

    (tmp_path / "smc.toml").write_text(
        '[project]\nname = "fixtures"\n\n'
        '[sources]\npaths = ["machines/"]\n\n'
        '[output]\ndirectory = "generated/"\n'
    )
    return tmp_path
