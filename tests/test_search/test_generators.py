"""
Test Suite for the Random Distribution Generator Registry.
"""

from __future__ import annotations

import numpy as np
import pytest

from hypergrid.core.config import GeneratorConfig
from hypergrid.exceptions import UnknownGeneratorError
from hypergrid.search.generators import GeneratorRegistry, build_generator
from hypergrid.search.values import GeneratorRef, LiteralValue, ValueKind


@pytest.mark.unit
class TestGeneratorRegistry:
    """Tests for registration and resolution."""

    def test_resolve_literal_passthrough(self):
        literal = LiteralValue.of(0.1)

        assert GeneratorRegistry().resolve(literal) is literal

    def test_resolve_reference_calls_generator(self):
        calls = []

        def gen():
            calls.append(1)
            return 0.05

        registry = GeneratorRegistry({"lr": gen})

        assert registry.resolve(GeneratorRef("lr")) == LiteralValue(0.05, ValueKind.DOUBLE)
        registry.resolve(GeneratorRef("lr"))
        assert len(calls) == 2

    def test_numpy_scalars_are_unwrapped(self):
        registry = GeneratorRegistry({"depth": lambda: np.int64(6)})

        resolved = registry.resolve(GeneratorRef("depth"))

        assert resolved.kind is ValueKind.INT
        assert type(resolved.value) is int

    def test_unknown_reference(self):
        registry = GeneratorRegistry({"lr": lambda: 0.1})

        with pytest.raises(UnknownGeneratorError, match="missing"):
            registry.resolve(GeneratorRef("missing"))

    def test_unknown_reference_is_lookup_error(self):
        with pytest.raises(LookupError):
            GeneratorRegistry().resolve(GeneratorRef("x"))

    def test_mapping_protocol_and_register(self):
        registry = GeneratorRegistry()
        assert len(registry) == 0

        registry.register("lr", lambda: 0.1)

        assert len(registry) == 1
        assert "lr" in registry
        assert list(registry) == ["lr"]


@pytest.mark.unit
class TestBuildGenerator:
    """Tests for GeneratorConfig-backed generators."""

    def test_uniform_within_bounds(self):
        gen = build_generator(
            GeneratorConfig(distribution="uniform", low=0.1, high=0.2), np.random.default_rng(0)
        )

        values = [gen() for _ in range(50)]
        assert all(0.1 <= v < 0.2 for v in values)
        assert all(isinstance(v, float) for v in values)

    def test_loguniform_within_bounds(self):
        gen = build_generator(
            GeneratorConfig(distribution="loguniform", low=0.01, high=1.0),
            np.random.default_rng(0),
        )

        assert all(0.01 <= gen() <= 1.0 for _ in range(50))

    def test_randint_is_inclusive(self):
        gen = build_generator(
            GeneratorConfig(distribution="randint", low=4, high=5), np.random.default_rng(0)
        )

        values = {gen() for _ in range(100)}
        assert values == {4, 5}

    def test_normal(self):
        gen = build_generator(
            GeneratorConfig(distribution="normal", mean=1.0, std=0.1), np.random.default_rng(0)
        )

        assert isinstance(gen(), float)

    def test_choice(self):
        gen = build_generator(
            GeneratorConfig(distribution="choice", choices=["Min", "Max"]),
            np.random.default_rng(0),
        )

        assert {gen() for _ in range(50)} <= {"Min", "Max"}

    def test_from_config_is_reproducible(self):
        configs = {"lr": GeneratorConfig(distribution="uniform", low=0.0, high=1.0)}

        first = GeneratorRegistry.from_config(configs, seed=5)
        second = GeneratorRegistry.from_config(configs, seed=5)

        assert [first["lr"]() for _ in range(3)] == [second["lr"]() for _ in range(3)]
