"""
Tests for pseudo_fixture.options module.

Tests baseline construction, merging of per-run overrides, and YAML
loading.
"""

from pathlib import Path

import pytest
from pydantic import BaseModel

from pseudo_fixture.errors import InvalidOptionsError
from pseudo_fixture.options import OptionsBaseline, load_options


class _Settings(BaseModel):
    db_url: str = "sqlite://"
    workers: int = 2


# =============================================================================
# OptionsBaseline Tests
# =============================================================================


class TestOptionsBaseline:
    """Tests for OptionsBaseline construction and merging."""

    def test_none_is_empty(self) -> None:
        """No source should give an empty baseline."""
        assert dict(OptionsBaseline()) == {}

    def test_from_mapping(self) -> None:
        """A mapping source should be copied."""
        baseline = OptionsBaseline({"o1": "a", "o2": "b"})
        assert baseline["o1"] == "a"
        assert len(baseline) == 2
        assert list(baseline) == ["o1", "o2"]

    def test_from_pydantic_model(self) -> None:
        """A pydantic model should be dumped into options."""
        baseline = OptionsBaseline(_Settings(workers=4))
        assert dict(baseline) == {"db_url": "sqlite://", "workers": 4}

    def test_rejects_other_types(self) -> None:
        """Sources other than mappings and models are rejected."""
        with pytest.raises(InvalidOptionsError):
            OptionsBaseline(["o1", "o2"])  # type: ignore[arg-type]

    def test_rejects_non_string_keys(self) -> None:
        """Option names must be strings."""
        with pytest.raises(InvalidOptionsError):
            OptionsBaseline({1: "a"})

    def test_is_immutable(self) -> None:
        """The baseline should not support item assignment."""
        baseline = OptionsBaseline({"o1": "a"})
        with pytest.raises(TypeError):
            baseline["o1"] = "z"  # type: ignore[index]

    def test_source_mutation_does_not_leak(self) -> None:
        """Changing the source mapping later has no effect."""
        source = {"o1": "a"}
        baseline = OptionsBaseline(source)
        source["o1"] = "z"
        assert baseline["o1"] == "a"

    def test_seed_returns_fresh_copy(self) -> None:
        """Each seed should be an independent dict."""
        baseline = OptionsBaseline({"o1": "a"})
        first = baseline.seed()
        first["fixture"] = 1
        assert baseline.seed() == {"o1": "a"}

    def test_merged_override_wins(self) -> None:
        """Overrides should replace baseline values per key."""
        baseline = OptionsBaseline({"o1": "a", "o2": "b"})
        assert baseline.merged({"o1": "z"}) == {"o1": "z", "o2": "b"}
        assert dict(baseline) == {"o1": "a", "o2": "b"}

    def test_merged_without_overrides(self) -> None:
        """No overrides should give a copy of the baseline."""
        baseline = OptionsBaseline({"o1": "a"})
        assert baseline.merged() == {"o1": "a"}

    def test_merged_accepts_new_keys(self) -> None:
        """Overrides may introduce names absent from the baseline."""
        baseline = OptionsBaseline({"o1": "a"})
        assert baseline.merged({"extra": 1}) == {"o1": "a", "extra": 1}

    def test_merged_accepts_model(self) -> None:
        """Overrides may be given as a pydantic model."""
        baseline = OptionsBaseline({"db_url": "postgres://", "debug": True})
        merged = baseline.merged(_Settings())
        assert merged == {"db_url": "sqlite://", "workers": 2, "debug": True}


# =============================================================================
# YAML Tests
# =============================================================================


class TestOptionsYaml:
    """Tests for YAML serialization and loading."""

    def test_to_yaml(self) -> None:
        """Baseline should serialize to YAML."""
        yaml_str = OptionsBaseline({"db_url": "sqlite://", "workers": 2}).to_yaml()
        assert "db_url: sqlite://" in yaml_str
        assert "workers: 2" in yaml_str

    def test_from_yaml(self) -> None:
        """Baseline should deserialize from a YAML mapping."""
        yaml_str = """
db_url: sqlite://
workers: 4
tags:
  - slow
  - db
"""
        baseline = OptionsBaseline.from_yaml(yaml_str)
        assert baseline["workers"] == 4
        assert baseline["tags"] == ["slow", "db"]

    def test_from_yaml_empty_document(self) -> None:
        """An empty document should give an empty baseline."""
        assert dict(OptionsBaseline.from_yaml("")) == {}

    def test_from_yaml_rejects_non_mapping(self) -> None:
        """A YAML list is not a valid options document."""
        with pytest.raises(InvalidOptionsError):
            OptionsBaseline.from_yaml("- a\n- b\n")

    def test_load_options(self, tmp_path: Path) -> None:
        """load_options should read a YAML file."""
        path = tmp_path / "options.yaml"
        path.write_text("o1: a\no2: b\n")
        baseline = load_options(path)
        assert dict(baseline) == {"o1": "a", "o2": "b"}

    def test_load_options_accepts_str_path(self, tmp_path: Path) -> None:
        """load_options should accept a string path."""
        path = tmp_path / "options.yaml"
        path.write_text("o1: a\n")
        assert load_options(str(path))["o1"] == "a"

    def test_load_options_missing_file(self, tmp_path: Path) -> None:
        """A missing file should raise FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_options(tmp_path / "missing.yaml")
