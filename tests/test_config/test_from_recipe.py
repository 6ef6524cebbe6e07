"""
Test Suite for Config.from_recipe() and _deep_set helper.

Tests the YAML-first factory path used by the ``hypergrid`` CLI,
including dot-notation override application.
"""

from __future__ import annotations

import pytest
import yaml
from pydantic import ValidationError

from hypergrid.core.config.manifest import Config, _deep_set
from hypergrid.exceptions import HyperGridConfigError


# _DEEP_SET HELPER
@pytest.mark.unit
class TestDeepSet:
    """Tests for the _deep_set module-level helper."""

    def test_single_key(self):
        data = {"a": 1}
        _deep_set(data, "a", 2)
        assert data == {"a": 2}

    def test_nested_key(self):
        data = {"search": {"n_tries": 10}}
        _deep_set(data, "search.n_tries", 20)
        assert data["search"]["n_tries"] == 20

    def test_creates_intermediate_dicts(self):
        data = {}
        _deep_set(data, "a.b.c", 42)
        assert data == {"a": {"b": {"c": 42}}}

    def test_preserves_siblings(self):
        data = {"search": {"n_tries": 10, "seed": 42}}
        _deep_set(data, "search.n_tries", 20)
        assert data["search"]["seed"] == 42

    def test_replaces_non_dict_intermediate(self):
        data = {"model": None}
        _deep_set(data, "model.depth", 4)
        assert data == {"model": {"depth": 4}}

    def test_bool_value(self):
        data = {"telemetry": {"save_reports": True}}
        _deep_set(data, "telemetry.save_reports", False)
        assert data["telemetry"]["save_reports"] is False


# CONFIG.FROM_RECIPE
@pytest.mark.integration
class TestFromRecipe:
    """Tests for Config.from_recipe() factory method."""

    @pytest.fixture
    def recipe(self, tmp_path):
        content = {
            "dataset": {"name": "housing", "synthetic_objects": 50},
            "search": {"strategy": "grid", "param_grid": {"depth": [4, 6]}},
            "model": {"loss_function": "RMSE", "iterations": 20},
        }
        path = tmp_path / "recipe.yaml"
        path.write_text(yaml.dump(content))
        return path

    def test_loads_valid_recipe(self, recipe):
        cfg = Config.from_recipe(recipe)

        assert cfg.dataset.name == "housing"
        assert cfg.search.grids == [{"depth": [4, 6]}]
        assert cfg.model["iterations"] == 20

    def test_applies_scalar_overrides(self, recipe):
        cfg = Config.from_recipe(recipe, {"search.seed": 7, "model.depth": 4})

        assert cfg.search.seed == 7
        assert cfg.model["depth"] == 4

    def test_override_creates_section(self, recipe):
        cfg = Config.from_recipe(recipe, {"telemetry.top_k": 3})

        assert cfg.telemetry.top_k == 3

    def test_invalid_override_rejected(self, recipe):
        with pytest.raises(ValidationError):
            Config.from_recipe(recipe, {"search.n_tries": 0})

    def test_missing_recipe(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Config.from_recipe(tmp_path / "missing.yaml")

    def test_empty_recipe_uses_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        cfg = Config.from_recipe(path)

        assert cfg == Config()

    def test_non_mapping_recipe(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(HyperGridConfigError, match="mapping"):
            Config.from_recipe(path)
