"""
Options baseline for fixture resolution.

Options are plain name/value pairs seeded into the bag before any fixture is
resolved. The baseline is immutable; per-run overrides are merged into a
fresh copy and never written back.
"""

from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml
from pydantic import BaseModel

from pseudo_fixture.errors import InvalidOptionsError

OptionsSource = Mapping[str, Any] | BaseModel | None


class OptionsBaseline(Mapping[str, Any]):
    """Immutable default options merged into every resolution.

    Example:
        >>> baseline = OptionsBaseline({"o1": "a", "o2": "b"})
        >>> baseline.merged({"o1": "z"})
        {'o1': 'z', 'o2': 'b'}
        >>> dict(baseline)
        {'o1': 'a', 'o2': 'b'}
    """

    def __init__(self, source: OptionsSource = None) -> None:
        if source is None:
            values: dict[str, Any] = {}
        elif isinstance(source, BaseModel):
            values = source.model_dump()
        elif isinstance(source, Mapping):
            values = dict(source)
        else:
            raise InvalidOptionsError(
                f"Options must be a mapping or pydantic model, got {type(source).__name__}"
            )
        for key in values:
            if not isinstance(key, str):
                raise InvalidOptionsError(f"Option names must be strings, got {key!r}")
        self._values = MappingProxyType(values)

    def seed(self) -> dict[str, Any]:
        """Return a fresh, mutable copy of the baseline."""
        return dict(self._values)

    def merged(self, overrides: OptionsSource = None) -> dict[str, Any]:
        """Return the baseline updated with overrides; overrides win per key."""
        bag = self.seed()
        if overrides is not None:
            bag.update(OptionsBaseline(overrides))
        return bag

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"OptionsBaseline({dict(self._values)!r})"

    def to_yaml(self) -> str:
        """Serialize the baseline to YAML."""
        result: str = yaml.dump(
            dict(self._values),
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
        return result

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "OptionsBaseline":
        """Deserialize a baseline from a YAML mapping.

        An empty document yields an empty baseline.
        """
        data = yaml.safe_load(yaml_str)
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise InvalidOptionsError(
                f"Options document must be a mapping, got {type(data).__name__}"
            )
        return cls(data)


def load_options(path: str | Path) -> OptionsBaseline:
    """
    Load an options baseline from a YAML file.

    Args:
        path: Path to YAML options file

    Returns:
        OptionsBaseline loaded from file
    """
    path = Path(path)
    if not path.exists():
        msg = f"Options file not found: {path}"
        raise FileNotFoundError(msg)

    with path.open() as f:
        return OptionsBaseline.from_yaml(f.read())
