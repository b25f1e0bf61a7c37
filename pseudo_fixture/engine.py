"""
Fixture resolution engine.

PseudoFixture lazily builds the fixtures a callback asks for, in dependency
order, memoizes them across calls, and releases them in reverse order of
acquisition.

Resolution of one name:

1. skip names that are not fixtures (options, unknown keys)
2. skip names already in the bag
3. skip names still in flight (a circular back-edge, logged only when a
   setup closes it)
4. resolve the names declared by setup and teardown, in order
5. queue the teardown at the front of the teardown stack
6. run setup and store its value in the bag
"""

import logging
from collections.abc import Awaitable, Callable, Mapping
from types import MappingProxyType, TracebackType
from typing import Any, TypeVar

from pseudo_fixture.definitions import FixtureRegistry, FixtureSpec
from pseudo_fixture.errors import CyclicDependencyError
from pseudo_fixture.graph import CyclePolicy, DependencyGraph
from pseudo_fixture.options import OptionsBaseline, OptionsSource
from pseudo_fixture.signature import ParameterInspector, SignatureInspector, call_with_bag

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PseudoFixture:
    """Resolves fixtures for test callbacks and tears them down afterwards.

    Fixtures and callbacks declare what they need through parameter names.
    Options from the baseline are in the bag before any fixture resolves, so
    they can be requested the same way.

    Example:
        >>> fx = PseudoFixture(
        ...     {
        ...         "db": {"setup": open_db, "teardown": close_db},
        ...         "repo": lambda db: Repository(db),
        ...     },
        ...     {"db_url": "sqlite://"},
        ... )
        >>> await fx.full_run(lambda repo: repo.count())
        0
    """

    def __init__(
        self,
        definitions: FixtureRegistry | Mapping[str, FixtureSpec],
        options: OptionsSource = None,
        *,
        inspector: SignatureInspector | None = None,
        cycle_policy: CyclePolicy = CyclePolicy.SKIP,
    ) -> None:
        """Creates a PseudoFixture.

        Args:
            definitions: Defines how the fixtures are created.
            options: Baseline options seeded into every resolution.
            inspector: Discovers the names a callback declares.
            cycle_policy: Behavior when a circular dependency is reached.
        """
        if isinstance(definitions, FixtureRegistry):
            self.registry = definitions
        else:
            self.registry = FixtureRegistry(definitions)
        self.options = OptionsBaseline(options)
        self.inspector = inspector or ParameterInspector()
        self.cycle_policy = CyclePolicy(cycle_policy)
        self.graph = DependencyGraph(self.registry, self.inspector)

        self._ready: dict[str, Any] = self.options.seed()
        self._teardowns: list[Callable[..., Any]] = []
        # Ordered so a strict cycle error can report the path
        self._in_flight: list[str] = []

    @property
    def ready(self) -> Mapping[str, Any]:
        """Read-only view of the resolved fixtures and options."""
        return MappingProxyType(self._ready)

    @property
    def pending_teardowns(self) -> int:
        """Number of teardowns queued for the next run_teardown."""
        return len(self._teardowns)

    async def _prepare(self, name: str, from_teardown: bool = False) -> None:
        definition = self.registry.get(name)
        if definition is None:
            return

        if name in self._ready:
            return

        if name in self._in_flight:
            if from_teardown:
                # Ready before any teardown runs, since its setup is still on the stack
                return
            cycle = self._in_flight[self._in_flight.index(name):] + [name]
            if self.cycle_policy is CyclePolicy.RAISE:
                raise CyclicDependencyError(cycle)
            logger.warning(
                "Circular dependency %s; fixture '%s' is left unset",
                " -> ".join(cycle),
                name,
            )
            return

        self._in_flight.append(name)
        try:
            for dep, dep_from_teardown in self.graph.declared_edges(name):
                await self._prepare(dep, dep_from_teardown)

            if definition.teardown is not None:
                self._teardowns.insert(0, definition.teardown)

            logger.debug("Setting up fixture '%s'", name)
            self._ready[name] = await call_with_bag(definition.setup, self._ready)
        finally:
            self._in_flight.remove(name)

    async def run(self, callback: Callable[..., Awaitable[T]] | Callable[..., T]) -> T:
        """Prepares all fixtures required by the callback and executes it with them.

        Fixtures resolved by earlier calls are reused.

        Args:
            callback: Function to run inside the PseudoFixture.

        Returns:
            Return value of the callback.
        """
        for name in self.inspector.inspect(callback):
            await self._prepare(name)

        result: T = await call_with_bag(callback, self._ready)
        return result

    async def full_run(
        self,
        callback: Callable[..., Awaitable[T]] | Callable[..., T],
        overrides: OptionsSource = None,
    ) -> T:
        """Like run, with teardown before and after the callback.

        The trailing teardown runs even when the callback raises. Overrides
        apply to this call only.

        Args:
            callback: Function to run inside the PseudoFixture.
            overrides: Options replacing baseline values for this call.

        Returns:
            Return value of the callback.
        """
        await self.run_teardown()
        self._ready = self.options.merged(overrides)
        try:
            return await self.run(callback)
        finally:
            await self.run_teardown()

    async def run_teardown(self) -> None:
        """Runs all teardown functions of used fixtures, newest first.

        Afterwards the bag holds only the baseline options again.
        """
        if self._teardowns:
            logger.debug("Running %d fixture teardown(s)", len(self._teardowns))
        for teardown in self._teardowns:
            await call_with_bag(teardown, self._ready)

        self._ready = self.options.seed()
        self._teardowns = []
        self._in_flight.clear()

    def validate(self) -> list[str]:
        """Report dependency problems without running any setup."""
        return self.graph.validate()

    async def __aenter__(self) -> "PseudoFixture":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.run_teardown()

    def __repr__(self) -> str:
        return (
            f"PseudoFixture(fixtures={len(self.registry)}, "
            f"ready={len(self._ready)}, pending_teardowns={len(self._teardowns)})"
        )
