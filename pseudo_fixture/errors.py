"""
Exceptions raised by pseudo_fixture.

Errors raised inside user setup/teardown bodies are never wrapped; these
types only cover problems detected by the library itself.
"""


class PseudoFixtureError(Exception):
    """Base class for all pseudo_fixture errors."""


class InvalidFixtureError(PseudoFixtureError, ValueError):
    """Raised when a fixture definition is structurally invalid."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid definition for fixture '{name}': {reason}")


class InvalidOptionsError(PseudoFixtureError, ValueError):
    """Raised when an options document is not a name/value mapping."""


class FixtureNotFoundError(PseudoFixtureError, KeyError):
    """Raised when a graph query names a fixture that does not exist."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Fixture '{name}' not found in registry")


class CyclicDependencyError(PseudoFixtureError, ValueError):
    """Raised when circular dependencies are detected in fixtures."""

    def __init__(self, cycle: list[str]) -> None:
        self.cycle = cycle
        cycle_str = " -> ".join(cycle)
        super().__init__(f"Circular dependency detected: {cycle_str}")
