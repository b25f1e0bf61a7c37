"""
Fixture definitions and the read-only fixture registry.

A fixture is a named setup step with an optional teardown step. Both are
called with the bag entries their parameters name:

    >>> async def open_db(db_url):
    ...     return await connect(db_url)
    >>> async def close_db(db):
    ...     await db.close()
    >>> FixtureDefinition(setup=open_db, teardown=close_db)
"""

from collections.abc import Callable, Iterator, Mapping
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from pseudo_fixture.errors import InvalidFixtureError
from pseudo_fixture.signature import required_positional_only


class FixtureDefinition(BaseModel):
    """How a single fixture is acquired and released.

    ``setup`` produces the fixture value; ``teardown`` releases it. Either may
    be a coroutine function or a plain function.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    setup: Callable[..., Any] = Field(
        ...,
        description="Callable producing the fixture value from its declared bag entries",
    )
    teardown: Callable[..., Any] | None = Field(
        default=None,
        description="Optional callable releasing the fixture",
    )
    description: str = Field(
        default="",
        description="Human-readable description of the fixture's purpose",
    )

    @field_validator("setup", "teardown")
    @classmethod
    def bindable_from_bag(cls, v: Callable[..., Any] | None) -> Callable[..., Any] | None:
        """Validate that every required parameter can be passed by keyword."""
        if v is not None:
            unbindable = required_positional_only(v)
            if unbindable:
                names = ", ".join(unbindable)
                raise ValueError(
                    f"Positional-only parameters cannot be filled from the bag: {names}"
                )
        return v

    @property
    def has_teardown(self) -> bool:
        """Check if this fixture declares a teardown step."""
        return self.teardown is not None


FixtureSpec = FixtureDefinition | Mapping[str, Any] | Callable[..., Any]


def _coerce(name: str, raw: FixtureSpec) -> FixtureDefinition:
    """Turn one registry entry into a FixtureDefinition."""
    if isinstance(raw, FixtureDefinition):
        return raw
    try:
        if isinstance(raw, Mapping):
            return FixtureDefinition.model_validate(dict(raw))
        if callable(raw):
            return FixtureDefinition(setup=raw)
    except ValidationError as e:
        raise InvalidFixtureError(name, str(e)) from e
    raise InvalidFixtureError(
        name, f"expected a FixtureDefinition, mapping or callable, got {type(raw).__name__}"
    )


class FixtureRegistry:
    """Immutable mapping from fixture name to FixtureDefinition.

    Entries may be given as FixtureDefinition instances, as mappings with
    ``setup``/``teardown`` keys, or as bare setup callables. Only the shape of
    each entry is validated; dependencies are not checked here.

    Looking up an unknown name is not an error: ``get`` returns ``None``,
    since callbacks freely mix fixture names with option names.

    Example:
        >>> registry = FixtureRegistry({
        ...     "config": lambda: {"debug": True},
        ...     "db": {"setup": open_db, "teardown": close_db},
        ... })
        >>> "db" in registry
        True
        >>> registry.get("unknown") is None
        True
    """

    def __init__(self, definitions: Mapping[str, FixtureSpec] | None = None) -> None:
        fixtures: dict[str, FixtureDefinition] = {}
        for name, raw in (definitions or {}).items():
            if not isinstance(name, str):
                raise InvalidFixtureError(repr(name), "fixture names must be strings")
            fixtures[name] = _coerce(name, raw)
        self._fixtures = MappingProxyType(fixtures)

    def get(self, name: str) -> FixtureDefinition | None:
        """Retrieve a fixture definition by name, or None if absent."""
        return self._fixtures.get(name)

    def has(self, name: str) -> bool:
        """Check if a fixture is registered."""
        return name in self._fixtures

    def names(self) -> list[str]:
        """List registered fixture names in registration order."""
        return list(self._fixtures)

    def __len__(self) -> int:
        return len(self._fixtures)

    def __contains__(self, name: object) -> bool:
        return name in self._fixtures

    def __iter__(self) -> Iterator[str]:
        return iter(self._fixtures)

    def __repr__(self) -> str:
        return f"FixtureRegistry({len(self._fixtures)} fixtures)"
