"""
pseudo_fixture - Lazy, dependency-ordered test fixtures.

Declare fixtures as setup/teardown pairs, then run test bodies that name the
fixtures they need as parameters:

    fx = PseudoFixture({"db": {"setup": open_db, "teardown": close_db}})
    await fx.full_run(lambda db: db.ping())
"""

from pseudo_fixture.definitions import FixtureDefinition, FixtureRegistry
from pseudo_fixture.engine import PseudoFixture
from pseudo_fixture.errors import (
    CyclicDependencyError,
    FixtureNotFoundError,
    InvalidFixtureError,
    InvalidOptionsError,
    PseudoFixtureError,
)
from pseudo_fixture.graph import CyclePolicy, DependencyGraph
from pseudo_fixture.options import OptionsBaseline, load_options
from pseudo_fixture.signature import (
    ParameterInspector,
    SignatureInspector,
    bind_bag,
    call_with_bag,
)

__version__ = "0.1.0"

__all__ = [
    # Engine
    "PseudoFixture",
    # Definitions and registry
    "FixtureDefinition",
    "FixtureRegistry",
    # Options
    "OptionsBaseline",
    "load_options",
    # Dependency graph
    "CyclePolicy",
    "DependencyGraph",
    # Signature inspection
    "ParameterInspector",
    "SignatureInspector",
    "bind_bag",
    "call_with_bag",
    # Errors
    "CyclicDependencyError",
    "FixtureNotFoundError",
    "InvalidFixtureError",
    "InvalidOptionsError",
    "PseudoFixtureError",
]
