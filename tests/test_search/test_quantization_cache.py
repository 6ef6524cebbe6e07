"""
Test Suite for the Quantization Cache.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from hypergrid.data_handler import QuantizationParams, create_synthetic_dataset
from hypergrid.search.quantization_cache import QuantizationCache

P32 = QuantizationParams(32, "Median", "Min")
P64 = QuantizationParams(64, "Median", "Min")


@pytest.fixture
def dataset():
    return create_synthetic_dataset(n_objects=20)


@pytest.mark.unit
class TestQuantizationCache:
    """Tests for maybe_requantize."""

    def test_first_call_quantizes(self, dataset):
        quantize = MagicMock(return_value="q")
        cache = QuantizationCache(quantize)

        prepared, did = cache.maybe_requantize(None, P32, dataset)

        assert did is True
        assert prepared == "q"
        quantize.assert_called_once_with(dataset, P32)
        assert cache.current == "q"

    def test_unchanged_settings_reuse_cache(self, dataset):
        quantize = MagicMock(return_value="q")
        cache = QuantizationCache(quantize)
        cache.maybe_requantize(None, P32, dataset)

        prepared, did = cache.maybe_requantize(P32, QuantizationParams(32, "Median", "Min"), dataset)

        assert did is False
        assert prepared == "q"
        assert quantize.call_count == 1
        assert cache.requantize_count == 1

    @pytest.mark.parametrize(
        "changed",
        [
            QuantizationParams(64, "Median", "Min"),
            QuantizationParams(32, "Uniform", "Min"),
            QuantizationParams(32, "Median", "Max"),
        ],
    )
    def test_any_changed_setting_requantizes(self, dataset, changed):
        quantize = MagicMock(side_effect=["q1", "q2"])
        cache = QuantizationCache(quantize)
        cache.maybe_requantize(None, P32, dataset)

        prepared, did = cache.maybe_requantize(P32, changed, dataset)

        assert did is True
        assert prepared == "q2"

    def test_prepare_runs_once_per_quantization(self, dataset):
        prepare = MagicMock(side_effect=lambda q: ("split", q))
        cache = QuantizationCache(MagicMock(return_value="q"), prepare=prepare)

        cache.maybe_requantize(None, P32, dataset)
        prepared, _ = cache.maybe_requantize(P32, P32, dataset)

        assert prepared == ("split", "q")
        prepare.assert_called_once_with("q")

    def test_clear_forces_requantization(self, dataset):
        quantize = MagicMock(return_value="q")
        cache = QuantizationCache(quantize)
        cache.maybe_requantize(None, P32, dataset)

        cache.clear()
        _, did = cache.maybe_requantize(P32, P32, dataset)

        assert did is True
        assert quantize.call_count == 2

    def test_sequence_counts(self, dataset):
        cache = QuantizationCache(MagicMock(return_value="q"))
        previous = None
        for params in (P32, P32, P64, P64, P32):
            cache.maybe_requantize(previous, params, dataset)
            previous = params

        assert cache.requantize_count == 3
