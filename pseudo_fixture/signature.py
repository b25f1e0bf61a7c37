"""
Signature inspection for fixture callbacks.

A callback declares the bag entries it needs through its parameter list:

    async def setup(db, tmp_dir): ...

The inspector reports ``["db", "tmp_dir"]`` without calling anything; those
are the names the engine resolves. ``call_with_bag`` later invokes the
callback with bag entries matching its own parameters as keyword arguments.
"""

import inspect
from collections.abc import Callable, Mapping
from typing import Any, Protocol, runtime_checkable

_NAMED_KINDS = (
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
    inspect.Parameter.KEYWORD_ONLY,
)


@runtime_checkable
class SignatureInspector(Protocol):
    """Reports the bag names a callback declares, in declaration order."""

    def inspect(self, callback: Callable[..., Any]) -> list[str]: ...


def _signature(callback: Callable[..., Any]) -> inspect.Signature | None:
    try:
        return inspect.signature(callback)
    except (TypeError, ValueError):
        # Some builtins and C callables expose no signature
        return None


class ParameterInspector:
    """Signature inspector backed by ``inspect.signature``.

    Only parameters that can be passed by keyword are reported. ``*args`` and
    ``**kwargs`` are skipped, as is anything positional-only. A required
    positional-only parameter can never be filled from the bag, so fixture
    definitions declaring one are rejected when the registry is built.

    Example:
        >>> ParameterInspector().inspect(lambda db, *, tmp_dir=None: None)
        ['db', 'tmp_dir']
    """

    def inspect(self, callback: Callable[..., Any]) -> list[str]:
        signature = _signature(callback)
        if signature is None:
            return []
        return [
            param.name
            for param in signature.parameters.values()
            if param.kind in _NAMED_KINDS
        ]

    def __repr__(self) -> str:
        return "ParameterInspector()"


def required_positional_only(callback: Callable[..., Any]) -> list[str]:
    """Names of positional-only parameters without a default."""
    signature = _signature(callback)
    if signature is None:
        return []
    return [
        param.name
        for param in signature.parameters.values()
        if param.kind is inspect.Parameter.POSITIONAL_ONLY
        and param.default is inspect.Parameter.empty
    ]


def bind_bag(callback: Callable[..., Any], bag: Mapping[str, Any]) -> dict[str, Any]:
    """Build the keyword arguments a callback is invoked with.

    Arguments follow the callback's own parameters, whatever an inspector
    reported for it. A named parameter takes its value from the bag, falling
    back to its default, or ``None`` when it has no default. Callbacks taking
    ``**kwargs`` also receive every other bag entry.

    Args:
        callback: The setup, teardown, or test body to call.
        bag: Resolved fixtures and options.

    Returns:
        Keyword arguments for ``callback``.
    """
    signature = _signature(callback)
    if signature is None:
        return {}

    kwargs: dict[str, Any] = {}
    for param in signature.parameters.values():
        if param.kind is inspect.Parameter.VAR_KEYWORD:
            for name, value in bag.items():
                kwargs.setdefault(name, value)
        elif param.kind in _NAMED_KINDS:
            if param.name in bag:
                kwargs[param.name] = bag[param.name]
            elif param.default is not inspect.Parameter.empty:
                kwargs[param.name] = param.default
            else:
                kwargs[param.name] = None
    return kwargs


async def call_with_bag(callback: Callable[..., Any], bag: Mapping[str, Any]) -> Any:
    """Call ``callback`` with its bag entries, awaiting the result if needed."""
    result = callback(**bind_bag(callback, bag))
    if inspect.isawaitable(result):
        result = await result
    return result
