"""
Static view of the fixture dependency graph.

Edges come from the same signature inspection the engine uses, so the
orderings computed here match what a fresh engine would do at run time.
Nothing in this module calls a setup or teardown.
"""

from enum import Enum

from pseudo_fixture.definitions import FixtureDefinition, FixtureRegistry
from pseudo_fixture.errors import CyclicDependencyError, FixtureNotFoundError
from pseudo_fixture.signature import ParameterInspector, SignatureInspector


class CyclePolicy(str, Enum):
    """What to do when resolution reaches a fixture that is still in flight.

    - SKIP: drop the back-edge; the dependent sees ``None`` for that name
    - RAISE: raise CyclicDependencyError with the cycle path
    """

    SKIP = "skip"
    RAISE = "raise"


class DependencyGraph:
    """Dependency queries and validation over a FixtureRegistry.

    Example:
        >>> registry = FixtureRegistry({"db": lambda: 1, "session": lambda db: db})
        >>> DependencyGraph(registry).resolution_order("session")
        ['db', 'session']
    """

    def __init__(
        self,
        registry: FixtureRegistry,
        inspector: SignatureInspector | None = None,
    ) -> None:
        self.registry = registry
        self.inspector = inspector or ParameterInspector()

    def _definition(self, name: str) -> FixtureDefinition:
        definition = self.registry.get(name)
        if definition is None:
            raise FixtureNotFoundError(name)
        return definition

    def declared_edges(self, name: str) -> list[tuple[str, bool]]:
        """Names declared by a fixture's setup followed by its teardown.

        Each name is paired with whether it came from the teardown. Duplicates
        and non-fixture names are kept; this is exactly the list the engine
        walks. A teardown naming its own fixture receives the value being
        released, so that name is not a dependency.

        Raises:
            FixtureNotFoundError: If ``name`` is not a registered fixture.
        """
        definition = self._definition(name)
        edges = [(dep, False) for dep in self.inspector.inspect(definition.setup)]
        if definition.teardown is not None:
            edges += [
                (dep, True)
                for dep in self.inspector.inspect(definition.teardown)
                if dep != name
            ]
        return edges

    def declared_names(self, name: str) -> list[str]:
        """Names declared by a fixture's setup followed by its teardown."""
        return [dep for dep, _ in self.declared_edges(name)]

    def _fixture_edges(self, name: str) -> dict[str, bool]:
        # A name declared by both setup and teardown keeps its setup edge
        edges: dict[str, bool] = {}
        for dep, from_teardown in self.declared_edges(name):
            if dep in self.registry and dep not in edges:
                edges[dep] = from_teardown
        return edges

    def dependencies(self, name: str) -> list[str]:
        """Fixture names a fixture depends on, in order, without duplicates.

        Raises:
            FixtureNotFoundError: If ``name`` is not a registered fixture.
        """
        return list(self._fixture_edges(name))

    def resolution_order(
        self, name: str, cycle_policy: CyclePolicy = CyclePolicy.SKIP
    ) -> list[str]:
        """Setup-completion order for ``name`` on a fresh engine.

        Dependencies appear before dependents and ``name`` appears last. A
        teardown naming a fixture that is still being set up is not a cycle:
        that fixture is ready before any teardown runs.

        Raises:
            FixtureNotFoundError: If ``name`` is not a registered fixture.
            CyclicDependencyError: If a setup closes a cycle under CyclePolicy.RAISE.
        """
        if name not in self.registry:
            raise FixtureNotFoundError(name)

        result: list[str] = []
        self._visit(name, result, [], cycle_policy, from_teardown=False)
        return result

    def _visit(
        self,
        name: str,
        result: list[str],
        path: list[str],
        cycle_policy: CyclePolicy,
        from_teardown: bool,
    ) -> None:
        if name in result:
            return

        if name in path:
            if not from_teardown and cycle_policy is CyclePolicy.RAISE:
                raise CyclicDependencyError(path[path.index(name):] + [name])
            return

        path.append(name)
        for dep, dep_from_teardown in self._fixture_edges(name).items():
            self._visit(dep, result, path, cycle_policy, dep_from_teardown)
        path.pop()
        result.append(name)

    def find_cycles(self) -> list[list[str]]:
        """Find the first cycle reached from each registered fixture.

        Each cycle is reported once, as a path that ends where it started.
        Rotations of the same cycle count as one.
        """
        cycles: list[list[str]] = []
        seen: set[frozenset[str]] = set()
        for name in self.registry:
            try:
                self.resolution_order(name, CyclePolicy.RAISE)
            except CyclicDependencyError as e:
                key = frozenset(e.cycle)
                if key not in seen:
                    seen.add(key)
                    cycles.append(e.cycle)
        return cycles

    def validate(self) -> list[str]:
        """Collect human-readable dependency problems.

        Returns:
            List of validation error messages. Empty list if all valid.
        """
        return [f"Circular dependency: {' -> '.join(cycle)}" for cycle in self.find_cycles()]
